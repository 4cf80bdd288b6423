import asyncio
import contextlib
from typing import Callable, List, Optional

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chatroom import clock
from chatroom.logger import get_logger
from chatroom.services.participant_registry import ParticipantRegistry

logger = get_logger(__name__)


class ReaperOutcome(BaseModel):
    """What a single reaper tick did."""

    removed: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class InactivityReaper:
    """Periodically expires idle participants and announces their departure.

    ``start()`` returns the running task as a handle; ``stop()`` cancels it.
    The first tick runs right away, then one per ``interval_seconds``. A tick
    never raises, so a failing sweep does not end the loop.

    Departures are committed before they are announced. If posting a notice
    fails, that participant stays removed without a "sai da sala..." message
    and the failure is kept in ``ReaperOutcome.errors``.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        threshold_seconds: float = 10.0,
        interval_seconds: float = 15.0,
        now: Callable[[], float] = clock.now,
    ):
        self.session_factory = session_factory
        self.threshold_seconds = threshold_seconds
        self.interval_seconds = interval_seconds
        self.now = now
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> "asyncio.Task[None]":
        """Schedule the reaper loop on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run(), name="inactivity-reaper")
            logger.info(
                f"Reaper started (threshold={self.threshold_seconds}s, "
                f"interval={self.interval_seconds}s)"
            )
        return self._task

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Reaper stopped")

    async def tick(self, now: Optional[float] = None) -> ReaperOutcome:
        """
        Run one sweep:

        1. Remove every participant idle past the threshold
        2. Post one departure status message per removed participant
        """
        now = self.now() if now is None else now
        outcome = ReaperOutcome()

        try:
            async with self.session_factory() as db:
                registry = ParticipantRegistry(db)

                # Step 1: Sweep
                removed = await registry.sweep_expired(now, self.threshold_seconds)

                # Step 2: Announce each departure on its own
                for participant in removed:
                    outcome.removed.append(participant.name)
                    try:
                        await registry.message_log.post_system_status(
                            participant.name, now
                        )
                    except Exception as e:
                        outcome.errors.append(f"{participant.name}: {e}")
        except Exception as e:
            outcome.errors.append(f"sweep: {e}")

        return outcome

    async def _run(self) -> None:
        while True:
            outcome = await self.tick()
            self._log_outcome(outcome)
            await asyncio.sleep(self.interval_seconds)

    def _log_outcome(self, outcome: ReaperOutcome) -> None:
        if outcome.removed:
            logger.info(f"Reaper removed: {', '.join(outcome.removed)}")
        for error in outcome.errors:
            logger.error(f"Reaper tick failed: {error}")
