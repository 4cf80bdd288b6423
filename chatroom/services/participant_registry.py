from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chatroom import clock
from chatroom.constants import JOIN_TEXT
from chatroom.errors import DuplicateKeyError, DuplicateName, NotFound, ValidationError
from chatroom.logger import get_logger
from chatroom.models.api.messages import JoinResponse
from chatroom.models.api.participants import ParticipantResponse
from chatroom.repositories.participant_repository import ParticipantRepository
from chatroom.sanitizer import sanitize, sanitize_fields
from chatroom.services.message_log import MessageLog
from chatroom.validators import validate_participant

logger = get_logger(__name__)


class ParticipantRegistry:
    """Service for the presence lifecycle: join, list, heartbeat and expiry."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.participant_repo = ParticipantRepository(db)
        self.message_log = MessageLog(db)

    async def join(self, raw_name: Any, now: Optional[float] = None) -> JoinResponse:
        """
        Register a participant:

        1. Sanitize and validate the name
        2. Insert it; the store's unique index rejects a name already in use
        3. Broadcast the join status message
        """
        now = clock.now() if now is None else now

        # Step 1: Sanitize before validating so "<b></b>" counts as empty
        payload = sanitize_fields({"name": raw_name}, "name")
        errors = validate_participant(payload)
        if errors:
            raise ValidationError(errors)
        name = payload["name"]

        # Step 2: Check-and-insert is a single store operation
        try:
            participant = await self.participant_repo.add(name, clock.to_epoch_ms(now))
        except DuplicateKeyError as e:
            raise DuplicateName(f"Name '{name}' is already in use") from e

        # Step 3: Announce
        message = await self.message_log.post_system_status(name, now, text=JOIN_TEXT)
        logger.info(f"Participant joined: {name}")

        return JoinResponse(participant=participant, message=message)

    async def list(self) -> List[ParticipantResponse]:
        """Get every active participant, in no particular order."""
        return await self.participant_repo.get_all()

    async def heartbeat(self, name: Any, now: Optional[float] = None) -> None:
        """Refresh lastStatus of an active participant."""
        now = clock.now() if now is None else now
        clean_name = sanitize(name) if isinstance(name, str) else ""

        touched = None
        if clean_name:
            touched = await self.participant_repo.touch(
                clean_name, clock.to_epoch_ms(now)
            )
        if not touched:
            raise NotFound("Participant not found")

    async def sweep_expired(
        self, now: float, threshold_seconds: float
    ) -> List[ParticipantResponse]:
        """Remove and return participants idle for more than threshold_seconds.

        Removal and read are one DELETE ... RETURNING, so a participant taken
        by a concurrent sweep is only ever returned to one caller.
        """
        cutoff = clock.to_epoch_ms(now - threshold_seconds)
        removed = await self.participant_repo.delete_inactive_since(cutoff)
        for participant in removed:
            logger.info(f"Participant expired: {participant.name}")
        return removed
