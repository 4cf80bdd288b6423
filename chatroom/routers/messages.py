from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Header, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.constants import IDENTITY_HEADER
from chatroom.database import get_db
from chatroom.models.api.messages import MessageResponse
from chatroom.services.message_log import MessageLog

router = APIRouter()


def _as_dict(payload: Any) -> dict:
    return payload if isinstance(payload, dict) else {}


@router.post("", response_model=MessageResponse, status_code=201)
async def post_message(
    payload: Any = Body(None),
    user: Optional[str] = Header(None, alias=IDENTITY_HEADER),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """
    Post a message.

    Body: {"to", "text", "type"}. The sender comes from the User header, or
    from a "from" body field when the header is absent.
    """
    body = _as_dict(payload)
    service = MessageLog(db)
    return await service.post(
        raw_from=user if user is not None else body.get("from"),
        raw_to=body.get("to"),
        raw_text=body.get("text"),
        type=body.get("type"),
    )


@router.get("", response_model=List[MessageResponse])
async def list_messages(
    limit: Optional[str] = Query(
        None, description="Return only the most recent N visible messages"
    ),
    user: Optional[str] = Header(None, alias=IDENTITY_HEADER),
    db: AsyncSession = Depends(get_db),
) -> List[MessageResponse]:
    """
    List messages visible to the caller, oldest first.

    Query parameters:
    - limit: positive integer (optional)
    """
    service = MessageLog(db)
    return await service.list_for(user, limit)


@router.put("/{message_id}", response_model=MessageResponse)
async def edit_message(
    message_id: int,
    payload: Any = Body(None),
    user: Optional[str] = Header(None, alias=IDENTITY_HEADER),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Edit a message written by the caller."""
    body = _as_dict(payload)
    service = MessageLog(db)
    return await service.edit(
        message_id,
        caller=user,
        new_to=body.get("to"),
        new_text=body.get("text"),
        new_type=body.get("type"),
    )


@router.delete("/{message_id}", status_code=200)
async def delete_message(
    message_id: int,
    user: Optional[str] = Header(None, alias=IDENTITY_HEADER),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete a message written by the caller."""
    service = MessageLog(db)
    await service.delete(message_id, user)
    return Response(status_code=200)
