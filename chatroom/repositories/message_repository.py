from typing import Any, List, Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.constants import BROADCAST_TARGET, MESSAGE_TYPE_PUBLIC
from chatroom.models.api.messages import MessageResponse
from chatroom.models.db.message_model import MessageModel
from chatroom.repositories.base_repository import BaseRepository


class MessageRepository(BaseRepository[MessageModel, MessageResponse]):
    """Repository for message operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, MessageModel)

    async def get_by_id(self, message_id: int) -> Optional[MessageResponse]:
        """Get a single message by ID."""
        return await self.find_one(self.model_class.id == message_id)

    async def add(
        self, from_name: str, to_name: str, text: str, type: str, time: str
    ) -> MessageResponse:
        """Insert a message; the store assigns its id."""
        return await self.insert_one(
            from_name=from_name, to_name=to_name, text=text, type=type, time=time
        )

    async def get_visible_to(
        self, viewer: Optional[str], limit: Optional[int] = None
    ) -> List[MessageResponse]:
        """Get messages the viewer may see, oldest first.

        With a limit, only the most recent ``limit`` visible messages are
        returned (still oldest first).
        """
        criteria = self.visibility_filter(viewer)
        if limit is None:
            return await self.find_many(criteria, order_by=self.model_class.id)

        latest = await self.find_many(
            criteria, order_by=self.model_class.id.desc(), limit=limit
        )
        return list(reversed(latest))

    async def update_content(
        self, message_id: int, author: str, to_name: str, text: str, type: str
    ) -> Optional[MessageResponse]:
        """Replace to/text/type of a message written by author."""
        return await self.update_one(
            self.model_class.id == message_id,
            self.model_class.from_name == author,
            values={"to_name": to_name, "text": text, "type": type},
        )

    async def delete_by_author(
        self, message_id: int, author: str
    ) -> Optional[MessageResponse]:
        """Delete a message written by author."""
        return await self.delete_one(
            self.model_class.id == message_id,
            self.model_class.from_name == author,
        )

    def visibility_filter(self, viewer: Optional[str]) -> Any:
        """Public messages, broadcasts, and anything sent to or by the viewer."""
        clauses = [
            self.model_class.type == MESSAGE_TYPE_PUBLIC,
            self.model_class.to_name == BROADCAST_TARGET,
        ]
        if viewer is not None:
            clauses.append(self.model_class.to_name == viewer)
            clauses.append(self.model_class.from_name == viewer)
        return or_(*clauses)

    def _to_pydantic(self, db_model: Any) -> MessageResponse:
        """Convert SQLAlchemy MessageModel to Pydantic MessageResponse."""
        return MessageResponse(
            id=db_model.id,
            from_=db_model.from_name,
            to=db_model.to_name,
            text=db_model.text,
            type=db_model.type,
            time=db_model.time,
        )
