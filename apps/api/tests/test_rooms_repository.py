"""SQL repository tests against an in-memory SQLite database."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest
import pytest_asyncio

from roomgate.core.errors import RepositoryError
from roomgate.db.session import build_engine, make_session_factory
from roomgate.models.base import Base
from roomgate.models.room import Room, RoomState
from roomgate.repositories.rooms import SqlRoomRepository
from roomgate.services.rooms import RoomLifecycleManager


@pytest_asyncio.fixture
async def session_factory():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield make_session_factory(engine)
    await engine.dispose()


def _room(room_id: str = "room-1", **overrides) -> Room:
    fields = {
        "id": room_id,
        "name": "Standup",
        "capacity": 5,
        "start_at": datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc),
        "end_at": datetime(2025, 1, 1, 9, 30, tzinfo=timezone.utc),
        "timezone": "UTC",
        "recurring": False,
        "state": RoomState.SCHEDULED,
    }
    fields.update(overrides)
    return Room(**fields)


@pytest.mark.asyncio
async def test_insert_then_get_by_id(session_factory):
    async with session_factory() as session:
        await SqlRoomRepository(session).insert(_room())

    async with session_factory() as session:
        stored = await SqlRoomRepository(session).get_by_id("room-1")

    assert stored is not None
    assert stored.name == "Standup"
    assert stored.capacity == 5
    assert stored.state is RoomState.SCHEDULED
    assert stored.created_at is not None


@pytest.mark.asyncio
async def test_get_by_id_returns_none_for_unknown_room(session_factory):
    async with session_factory() as session:
        assert await SqlRoomRepository(session).get_by_id("missing") is None


@pytest.mark.asyncio
async def test_update_state_returns_updated_row(session_factory):
    async with session_factory() as session:
        repository = SqlRoomRepository(session)
        await repository.insert(_room())

        updated = await repository.update_state("room-1", RoomState.CLOSED)

    assert updated is not None
    assert updated.id == "room-1"
    assert updated.state is RoomState.CLOSED

    async with session_factory() as session:
        stored = await SqlRoomRepository(session).get_by_id("room-1")

    assert stored.state is RoomState.CLOSED


@pytest.mark.asyncio
async def test_update_state_on_missing_room_returns_none(session_factory):
    async with session_factory() as session:
        assert await SqlRoomRepository(session).update_state("missing", RoomState.CLOSED) is None


@pytest.mark.asyncio
async def test_duplicate_insert_is_rolled_back(session_factory):
    async with session_factory() as session:
        await SqlRoomRepository(session).insert(_room())

    async with session_factory() as session:
        with pytest.raises(RepositoryError):
            await SqlRoomRepository(session).insert(_room(name="Impostor"))

    async with session_factory() as session:
        stored = await SqlRoomRepository(session).get_by_id("room-1")

    assert stored.name == "Standup"


@pytest.mark.asyncio
async def test_rejected_insert_leaves_no_partial_room(session_factory):
    async with session_factory() as session:
        with pytest.raises(RepositoryError):
            await SqlRoomRepository(session).insert(_room(capacity=99))

        assert await SqlRoomRepository(session).get_by_id("room-1") is None


@pytest.mark.asyncio
async def test_lifecycle_manager_over_sql_repository(session_factory, room_payload):
    async with session_factory() as session:
        manager = RoomLifecycleManager(SqlRoomRepository(session))
        room = await manager.create(room_payload)

        closed = await manager.close(room.id)
        again = await manager.close(room.id)

    assert closed.state is RoomState.CLOSED
    assert again.state is RoomState.CLOSED

    async with session_factory() as session:
        fresh = await RoomLifecycleManager(SqlRoomRepository(session)).get(room.id)

    assert fresh.state is RoomState.CLOSED
