from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.models.api.participants import ParticipantResponse
from chatroom.models.db.participant_model import ParticipantModel
from chatroom.repositories.base_repository import BaseRepository


class ParticipantRepository(BaseRepository[ParticipantModel, ParticipantResponse]):
    """Repository for participant operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, ParticipantModel)

    async def get_by_name(self, name: str) -> Optional[ParticipantResponse]:
        """Get the active participant with this exact name."""
        return await self.find_one(self.model_class.name == name)

    async def get_all(self) -> List[ParticipantResponse]:
        """Get every active participant."""
        return await self.find_many()

    async def add(self, name: str, last_status: int) -> ParticipantResponse:
        """Insert a participant; the unique index rejects a taken name."""
        return await self.insert_one(name=name, last_status=last_status)

    async def touch(self, name: str, last_status: int) -> Optional[ParticipantResponse]:
        """Set last_status for the named participant, None if absent."""
        return await self.update_one(
            self.model_class.name == name, values={"last_status": last_status}
        )

    async def delete_inactive_since(self, cutoff: int) -> List[ParticipantResponse]:
        """Remove and return participants whose last_status is before cutoff."""
        return await self.delete_many(self.model_class.last_status < cutoff)

    def _to_pydantic(self, db_model: Any) -> ParticipantResponse:
        """Convert SQLAlchemy ParticipantModel to Pydantic ParticipantResponse."""
        return ParticipantResponse(
            name=db_model.name,
            last_status=db_model.last_status,
        )
