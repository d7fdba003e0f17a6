"""
Message endpoints.

POST   /messages      — anonymous send to a public profile
GET    /messages      — owner's inbox
DELETE /messages/{id} — owner deletes one message
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from dependencies import get_current_owner, get_message_service
from schemas.dto.identity import OwnerIdentity
from schemas.dto.requests.message import SendMessageRequest
from schemas.dto.responses.common import MessageResponse, error_responses
from schemas.dto.responses.message import MessageOut, MessagesResponse, SendMessageResponse
from services.message_service import MessageService

router = APIRouter(
    prefix="/messages",
    tags=["messages"],
    responses=error_responses(400, 401, 403, 404, 500),
)


@router.post(
    "",
    response_model=SendMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    body: SendMessageRequest,
    service: MessageService = Depends(get_message_service),
) -> SendMessageResponse:
    message = await service.send(body.username, body.content)
    return SendMessageResponse(success=True, message=MessageOut.from_doc(message))


@router.get("", response_model=MessagesResponse)
async def list_messages(
    owner: OwnerIdentity = Depends(get_current_owner),
    service: MessageService = Depends(get_message_service),
) -> MessagesResponse:
    messages = await service.list_messages(owner)
    return MessagesResponse(
        success=True, messages=[MessageOut.from_doc(m) for m in messages]
    )


@router.delete("/{message_id}", response_model=MessageResponse)
async def delete_message(
    message_id: str,
    owner: OwnerIdentity = Depends(get_current_owner),
    service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    await service.delete_message(owner, message_id)
    return MessageResponse(success=True, message="Message deleted")
