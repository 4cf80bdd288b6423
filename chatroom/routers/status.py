from typing import Optional

from fastapi import APIRouter, Depends, Header, Response
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.constants import IDENTITY_HEADER
from chatroom.database import get_db
from chatroom.services.participant_registry import ParticipantRegistry

router = APIRouter()


@router.post("", status_code=200)
async def heartbeat(
    user: Optional[str] = Header(None, alias=IDENTITY_HEADER),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Keep the calling participant alive."""
    service = ParticipantRegistry(db)
    await service.heartbeat(user)
    return Response(status_code=200)
