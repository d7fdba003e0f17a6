"""
Account repository — every read and write against the `accounts` collection.

All state transitions that must not race are single-document conditional
updates:

- reissuing a verification code only succeeds if the record is still
  unverified and still carries the expiry/issue time the caller inspected;
- appending a message only succeeds if the record is verified and accepting
  messages at the moment of the write.

Store failures are logged and surfaced as DependencyFailureError; duplicate
key violations (username/email unique indexes) become ConflictError.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from errors import ConflictError, DependencyFailureError
from schemas.models.account import AccountDoc, MessageDoc
from shared.logging import get_logger

log = get_logger(__name__)

ACCOUNTS_COLLECTION = "accounts"


class AccountRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    @contextmanager
    def _store_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except DuplicateKeyError as e:
            key = next(iter((e.details or {}).get("keyValue", {}) or {}), None)
            log.warning("account_duplicate_key", operation=operation, field=key)
            raise ConflictError(
                "Username or email is already registered", field=key
            ) from e
        except PyMongoError as e:
            log.error(
                "account_store_error",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DependencyFailureError("The account store is unavailable") from e

    async def ensure_indexes(self) -> None:
        with self._store_call("ensure_indexes"):
            await self._col.create_index([("username", ASCENDING)], unique=True)
            await self._col.create_index([("email", ASCENDING)], unique=True)

    # ── Reads ────────────────────────────────────────────────────────────────

    async def find_by_username(self, username: str) -> Optional[AccountDoc]:
        with self._store_call("find_by_username"):
            doc = await self._col.find_one({"username": username})
        return AccountDoc.from_mongo(doc)

    async def find_by_identifier(self, identifier: str) -> Optional[AccountDoc]:
        """Look an account up by username or (case-insensitive) email."""
        with self._store_call("find_by_identifier"):
            doc = await self._col.find_one(
                {"$or": [{"username": identifier}, {"email": identifier.lower()}]}
            )
        return AccountDoc.from_mongo(doc)

    async def find_by_id(self, account_id: ObjectId) -> Optional[AccountDoc]:
        with self._store_call("find_by_id"):
            doc = await self._col.find_one({"_id": account_id})
        return AccountDoc.from_mongo(doc)

    async def email_in_use(
        self, email: str, exclude_id: Optional[ObjectId] = None
    ) -> bool:
        query: dict = {"email": email}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        with self._store_call("email_in_use"):
            doc = await self._col.find_one(query, {"_id": 1})
        return doc is not None

    async def list_messages(self, account_id: ObjectId) -> Optional[list[MessageDoc]]:
        """Return the account's messages in stored order, or None if it is gone."""
        with self._store_call("list_messages"):
            doc = await self._col.find_one({"_id": account_id}, {"messages": 1})
        if doc is None:
            return None
        return [MessageDoc.model_validate(m) for m in doc.get("messages", [])]

    # ── Writes ───────────────────────────────────────────────────────────────

    async def insert(self, account: AccountDoc) -> ObjectId:
        with self._store_call("insert"):
            result = await self._col.insert_one(account.to_mongo())
        return result.inserted_id

    async def reissue_code(
        self,
        account_id: ObjectId,
        *,
        code_hash: str,
        expires_at: datetime,
        issued_at: datetime,
        observed_expiry: datetime,
        observed_issued_at: Optional[datetime] = None,
        extra: Optional[dict] = None,
    ) -> bool:
        """Replace the verification code of a still-unverified account.

        The write only applies if the record still has the expiry and issue
        time the caller observed, so two concurrent reissues cannot both win.
        *extra* carries additional ``$set`` fields (new email/password hash on
        registration reclaim).

        Returns:
            True if the record was updated.
        """
        update = {
            "verify_code": code_hash,
            "verify_code_expiry": expires_at,
            "verify_code_issued_at": issued_at,
            "updated_at": issued_at,
            **(extra or {}),
        }
        query = {
            "_id": account_id,
            "is_verified": False,
            "verify_code_expiry": observed_expiry,
            "verify_code_issued_at": observed_issued_at,
        }
        with self._store_call("reissue_code"):
            result = await self._col.update_one(query, {"$set": update})
        return result.matched_count == 1

    async def mark_verified(
        self, account_id: ObjectId, *, code_hash: str, now: datetime
    ) -> bool:
        """Flip is_verified, provided the stored code digest is still *code_hash*.

        Guards against a registration reclaim replacing the code between the
        caller's check and this write.
        """
        with self._store_call("mark_verified"):
            result = await self._col.update_one(
                {"_id": account_id, "verify_code": code_hash},
                {"$set": {"is_verified": True, "updated_at": now}},
            )
        return result.matched_count == 1

    async def set_accepting_messages(
        self, account_id: ObjectId, accepting: bool, now: datetime
    ) -> bool:
        with self._store_call("set_accepting_messages"):
            result = await self._col.update_one(
                {"_id": account_id},
                {"$set": {"is_accepting_message": accepting, "updated_at": now}},
            )
        return result.matched_count == 1

    async def append_message_if_accepting(
        self, username: str, message: MessageDoc
    ) -> bool:
        """Atomically append *message* if the target is verified and accepting.

        The eligibility check and the append are one conditional update, so
        a concurrent toggle either lands before (message rejected) or after
        (message kept) but never in between.
        """
        with self._store_call("append_message"):
            doc = await self._col.find_one_and_update(
                {
                    "username": username,
                    "is_verified": True,
                    "is_accepting_message": True,
                },
                {"$push": {"messages": message.to_mongo()}},
                projection={"_id": 1},
            )
        return doc is not None

    async def delete_message(self, account_id: ObjectId, message_id: ObjectId) -> bool:
        with self._store_call("delete_message"):
            result = await self._col.update_one(
                {"_id": account_id, "messages._id": message_id},
                {"$pull": {"messages": {"_id": message_id}}},
            )
        return result.modified_count == 1
