"""
Authenticated owner identity.

Produced by the get_current_owner dependency from a verified access token
and passed explicitly into owner-only service calls.
"""

from __future__ import annotations

from bson import ObjectId
from pydantic import BaseModel, ConfigDict


class OwnerIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_id: str
    username: str

    @property
    def object_id(self) -> ObjectId:
        return ObjectId(self.account_id)
