"""
Account endpoints.

GET  /account/{username} — public profile status (verified accounts only)
GET  /accept-messages    — owner's acceptance toggle
POST /accept-messages    — change the owner's acceptance toggle
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_account_service, get_current_owner
from schemas.dto.identity import OwnerIdentity
from schemas.dto.requests.account import AcceptMessagesRequest
from schemas.dto.responses.account import AcceptMessagesResponse, AccountStatusResponse
from schemas.dto.responses.common import error_responses
from services.account_service import AccountService

router = APIRouter(tags=["account"], responses=error_responses(400, 401, 404, 500))


@router.get("/account/{username}", response_model=AccountStatusResponse)
async def account_status(
    username: str,
    service: AccountService = Depends(get_account_service),
) -> AccountStatusResponse:
    account = await service.get_public_status(username)
    return AccountStatusResponse(
        exists=True, is_accepting_message=account.is_accepting_message
    )


@router.get("/accept-messages", response_model=AcceptMessagesResponse)
async def get_accept_messages(
    owner: OwnerIdentity = Depends(get_current_owner),
    service: AccountService = Depends(get_account_service),
) -> AcceptMessagesResponse:
    accepting = await service.get_accepting_messages(owner)
    return AcceptMessagesResponse(success=True, is_accepting_message=accepting)


@router.post("/accept-messages", response_model=AcceptMessagesResponse)
async def set_accept_messages(
    body: AcceptMessagesRequest,
    owner: OwnerIdentity = Depends(get_current_owner),
    service: AccountService = Depends(get_account_service),
) -> AcceptMessagesResponse:
    accepting = await service.set_accepting_messages(owner, body.accept_messages)
    return AcceptMessagesResponse(success=True, is_accepting_message=accepting)
