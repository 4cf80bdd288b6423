from typing import Any, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from chatroom import clock
from chatroom.constants import BROADCAST_TARGET, LEAVE_TEXT, MESSAGE_TYPE_STATUS
from chatroom.errors import (
    Forbidden,
    InvalidLimit,
    NotFound,
    UnknownSender,
    ValidationError,
)
from chatroom.logger import get_logger
from chatroom.models.api.messages import MessageResponse
from chatroom.repositories.message_repository import MessageRepository
from chatroom.repositories.participant_repository import ParticipantRepository
from chatroom.sanitizer import sanitize, sanitize_fields
from chatroom.validators import validate_message

logger = get_logger(__name__)


class MessageLog:
    """Service for posting, listing, editing and deleting messages."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.message_repo = MessageRepository(db)
        self.participant_repo = ParticipantRepository(db)

    async def post(
        self,
        raw_from: Any,
        raw_to: Any,
        raw_text: Any,
        type: Any,
        now: Optional[float] = None,
    ) -> MessageResponse:
        """
        Post a message on behalf of a participant:

        1. Sanitize and validate the payload
        2. Verify the sender is an active participant
        3. Save the message with the current wall-clock time
        """
        now = clock.now() if now is None else now

        # Step 1: Validate
        payload = self._clean_payload(raw_to, raw_text, type)

        # Step 2: Sender must be active right now; later expiry does not matter
        sender = await self._require_active(raw_from)

        # Step 3: Save
        return await self.message_repo.add(
            from_name=sender,
            to_name=payload["to"],
            text=payload["text"],
            type=payload["type"],
            time=clock.format_time(now),
        )

    async def list_for(
        self, viewer: Any, limit: Optional[Union[int, str]] = None
    ) -> List[MessageResponse]:
        """
        List messages visible to viewer, oldest first.

        A message is visible when it is public, broadcast, addressed to the
        viewer or sent by the viewer. With ``limit`` only the most recent
        ``limit`` of those are returned.
        """
        parsed_limit = self._parse_limit(limit)
        viewer_name = sanitize(viewer) if isinstance(viewer, str) else None
        return await self.message_repo.get_visible_to(viewer_name, parsed_limit)

    async def edit(
        self,
        message_id: int,
        caller: Any,
        new_to: Any,
        new_text: Any,
        new_type: Any,
        now: Optional[float] = None,
    ) -> MessageResponse:
        """
        Replace recipient, text and type of a message its author wrote:

        1. Validate the new payload
        2. NotFound for a missing message, Forbidden for anyone but its author
        3. The author must still be an active participant

        ``time`` keeps the original post time, so ``now`` is not stored.
        """
        payload = self._clean_payload(new_to, new_text, new_type)

        caller_name = sanitize(caller) if isinstance(caller, str) else None
        message = await self._require_authored_by(message_id, caller_name)

        author = await self._require_active(caller_name)

        updated = await self.message_repo.update_content(
            message.id, author, payload["to"], payload["text"], payload["type"]
        )
        if not updated:
            # Deleted between the read and the write
            raise NotFound("Message not found")
        return updated

    async def delete(self, message_id: int, caller: Any) -> None:
        """Remove a message its author wrote."""
        author = sanitize(caller) if isinstance(caller, str) else None
        message = await self._require_authored_by(message_id, author)

        deleted = await self.message_repo.delete_by_author(message.id, message.from_)
        if not deleted:
            raise NotFound("Message not found")

    async def post_system_status(
        self,
        participant_name: str,
        now: Optional[float] = None,
        text: str = LEAVE_TEXT,
    ) -> MessageResponse:
        """Broadcast a join or leave notice.

        Skips the sender check since a departing participant is already gone.
        """
        now = clock.now() if now is None else now
        return await self.message_repo.add(
            from_name=participant_name,
            to_name=BROADCAST_TARGET,
            text=text,
            type=MESSAGE_TYPE_STATUS,
            time=clock.format_time(now),
        )

    def _clean_payload(self, to: Any, text: Any, type: Any) -> dict:
        payload = sanitize_fields({"to": to, "text": text, "type": type}, "to", "text")
        errors = validate_message(payload)
        if errors:
            raise ValidationError(errors)
        return payload

    async def _require_active(self, raw_name: Any) -> str:
        name = sanitize(raw_name) if isinstance(raw_name, str) else ""
        if not name or not await self.participant_repo.get_by_name(name):
            raise UnknownSender(f"'{name}' is not an active participant")
        return name

    async def _require_authored_by(
        self, message_id: int, author: Optional[str]
    ) -> MessageResponse:
        message = await self.message_repo.get_by_id(message_id)
        if not message:
            raise NotFound("Message not found")
        if message.from_ != author:
            logger.warning(f"Rejected change of message {message_id} by {author!r}")
            raise Forbidden()
        return message

    def _parse_limit(self, limit: Optional[Union[int, str]]) -> Optional[int]:
        if limit is None:
            return None
        if isinstance(limit, bool):
            raise InvalidLimit()
        if isinstance(limit, int):
            value = limit
        else:
            try:
                value = int(str(limit).strip())
            except ValueError as e:
                raise InvalidLimit() from e
        if value <= 0:
            raise InvalidLimit()
        return value
