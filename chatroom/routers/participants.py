from typing import Any, List

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.database import get_db
from chatroom.models.api.messages import MessageResponse
from chatroom.models.api.participants import ParticipantResponse
from chatroom.services.participant_registry import ParticipantRegistry

router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=201)
async def join(
    payload: Any = Body(None), db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """
    Join the room.

    Body: {"name": "..."}. Returns the "entra na sala..." status message.
    """
    body = payload if isinstance(payload, dict) else {}
    service = ParticipantRegistry(db)
    result = await service.join(body.get("name"))
    return result.message


@router.get("", response_model=List[ParticipantResponse], status_code=201)
async def list_participants(
    db: AsyncSession = Depends(get_db),
) -> List[ParticipantResponse]:
    """List active participants."""
    service = ParticipantRegistry(db)
    return await service.list()
