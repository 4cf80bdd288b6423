import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.database import Database
from chatroom.errors import DuplicateName, NotFound, ValidationError
from chatroom.models.api.messages import JoinResponse
from chatroom.services.message_log import MessageLog
from chatroom.services.participant_registry import ParticipantRegistry


async def _names(registry: ParticipantRegistry) -> list:
    return [p.name for p in await registry.list()]


class TestJoin:
    """Tests for ParticipantRegistry.join."""

    @pytest.mark.asyncio
    async def test_join(self, test_db: AsyncSession) -> None:
        registry = ParticipantRegistry(test_db)

        result = await registry.join("Ana", now=1000.0)

        assert isinstance(result, JoinResponse)
        assert result.participant.name == "Ana"
        assert result.participant.last_status == 1000000
        assert result.message.from_ == "Ana"
        assert result.message.to == "Todos"
        assert result.message.text == "entra na sala..."
        assert result.message.type == "status"
        assert [p.name for p in await registry.list()] == ["Ana"]

    @pytest.mark.asyncio
    async def test_join_sanitizes_name(self, test_db: AsyncSession) -> None:
        registry = ParticipantRegistry(test_db)

        result = await registry.join("  <b>Ana</b> ")

        assert result.participant.name == "Ana"
        assert "Ana" in await _names(registry)

    @pytest.mark.parametrize("raw_name", ["", "   ", "<b></b>", None, 42])
    @pytest.mark.asyncio
    async def test_join_invalid_name(self, test_db: AsyncSession, raw_name) -> None:
        registry = ParticipantRegistry(test_db)

        with pytest.raises(ValidationError) as exc_info:
            await registry.join(raw_name)

        assert exc_info.value.errors
        assert exc_info.value.errors[0].startswith("name:")
        assert await registry.list() == []
        assert await MessageLog(test_db).list_for(None) == []

    @pytest.mark.asyncio
    async def test_join_duplicate_name(self, test_db: AsyncSession) -> None:
        registry = ParticipantRegistry(test_db)
        await registry.join("Ana", now=1000.0)

        with pytest.raises(DuplicateName):
            await registry.join("<i>Ana</i>", now=1001.0)

        participants = await registry.list()
        assert len(participants) == 1
        assert participants[0].last_status == 1000000
        # Only the first join was announced
        assert len(await MessageLog(test_db).list_for(None)) == 1

    @pytest.mark.asyncio
    async def test_names_are_case_sensitive(self, test_db: AsyncSession) -> None:
        registry = ParticipantRegistry(test_db)
        await registry.join("Ana")
        await registry.join("ana")

        assert sorted(p.name for p in await registry.list()) == ["Ana", "ana"]

    @pytest.mark.asyncio
    async def test_concurrent_join_same_name(self, database: Database) -> None:
        """Two sessions racing on one name: exactly one wins."""

        async def join_in_own_session() -> JoinResponse:
            async with database.session_factory() as db:
                return await ParticipantRegistry(db).join("Ana")

        results = await asyncio.gather(
            join_in_own_session(), join_in_own_session(), return_exceptions=True
        )

        successes = [r for r in results if isinstance(r, JoinResponse)]
        failures = [r for r in results if isinstance(r, DuplicateName)]
        assert len(successes) == 1
        assert len(failures) == 1

        async with database.session_factory() as db:
            assert [p.name for p in await ParticipantRegistry(db).list()] == ["Ana"]

    @pytest.mark.asyncio
    async def test_rejoin_after_expiry(self, test_db: AsyncSession) -> None:
        registry = ParticipantRegistry(test_db)
        await registry.join("Ana", now=1000.0)
        await registry.sweep_expired(now=1020.0, threshold_seconds=10)

        result = await registry.join("Ana", now=1021.0)

        assert result.participant.last_status == 1021000


class TestHeartbeat:
    """Tests for ParticipantRegistry.heartbeat."""

    @pytest.mark.asyncio
    async def test_heartbeat(self, test_db: AsyncSession) -> None:
        registry = ParticipantRegistry(test_db)
        await registry.join("Ana", now=1000.0)

        await registry.heartbeat("Ana", now=1009.5)

        participants = await registry.list()
        assert participants[0].last_status == 1009500

    @pytest.mark.parametrize("name", ["Ghost", "", None])
    @pytest.mark.asyncio
    async def test_heartbeat_unknown(self, test_db: AsyncSession, name) -> None:
        registry = ParticipantRegistry(test_db)
        await registry.join("Ana", now=1000.0)

        with pytest.raises(NotFound):
            await registry.heartbeat(name, now=1005.0)

        # Heartbeat never creates a participant
        assert [p.name for p in await registry.list()] == ["Ana"]

    @pytest.mark.asyncio
    async def test_heartbeat_keeps_participant_alive(
        self, test_db: AsyncSession
    ) -> None:
        registry = ParticipantRegistry(test_db)
        await registry.join("Ana", now=1000.0)
        await registry.heartbeat("Ana", now=1008.0)

        removed = await registry.sweep_expired(now=1015.0, threshold_seconds=10)

        assert removed == []
        assert "Ana" in await _names(registry)


class TestSweepExpired:
    """Tests for ParticipantRegistry.sweep_expired."""

    @pytest.mark.asyncio
    async def test_sweep_removes_only_idle(self, test_db: AsyncSession) -> None:
        registry = ParticipantRegistry(test_db)
        await registry.join("Ana", now=1000.0)
        await registry.join("Bob", now=1008.0)

        removed = await registry.sweep_expired(now=1015.0, threshold_seconds=10)

        assert [p.name for p in removed] == ["Ana"]
        assert "Ana" not in await _names(registry)
        assert "Bob" in await _names(registry)

    @pytest.mark.asyncio
    async def test_sweep_keeps_participant_exactly_at_threshold(
        self, test_db: AsyncSession
    ) -> None:
        registry = ParticipantRegistry(test_db)
        await registry.join("Ana", now=1005.0)

        removed = await registry.sweep_expired(now=1015.0, threshold_seconds=10)

        assert removed == []
        assert "Ana" in await _names(registry)

    @pytest.mark.asyncio
    async def test_sweep_does_not_post_messages(self, test_db: AsyncSession) -> None:
        registry = ParticipantRegistry(test_db)
        await registry.join("Ana", now=1000.0)

        await registry.sweep_expired(now=1015.0, threshold_seconds=10)

        texts = [m.text for m in await MessageLog(test_db).list_for(None)]
        assert texts == ["entra na sala..."]

    @pytest.mark.asyncio
    async def test_concurrent_sweeps_report_each_participant_once(
        self, database: Database
    ) -> None:
        async with database.session_factory() as db:
            registry = ParticipantRegistry(db)
            for name in ("Ana", "Bob", "Carol"):
                await registry.join(name, now=1000.0)

        async def sweep_in_own_session():
            async with database.session_factory() as db:
                return await ParticipantRegistry(db).sweep_expired(
                    now=1015.0, threshold_seconds=10
                )

        first, second = await asyncio.gather(
            sweep_in_own_session(), sweep_in_own_session()
        )

        reported = sorted(p.name for p in first + second)
        assert reported == ["Ana", "Bob", "Carol"]
