"""Shared fixtures: an in-memory room repository and test settings."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from roomgate.core.config import Settings
from roomgate.core.errors import RepositoryError
from roomgate.models.room import Room, RoomState
from roomgate.services.signing import JwtTokenSigner

TEST_SECRET = "test-secret-with-enough-entropy-for-hs256"


class InMemoryRoomRepository:
    """Dict-backed stand-in for the SQL repository."""

    def __init__(self) -> None:
        self.rooms: dict[str, Room] = {}
        self.fail_writes = False
        self.update_calls: list[tuple[str, RoomState]] = []

    async def insert(self, room: Room) -> Room:
        if self.fail_writes or room.id in self.rooms:
            raise RepositoryError()
        if room.created_at is None:
            room.created_at = datetime.now(timezone.utc)
        self.rooms[room.id] = room
        return room

    async def get_by_id(self, room_id: str) -> Room | None:
        return self.rooms.get(room_id)

    async def update_state(self, room_id: str, state: RoomState) -> Room | None:
        self.update_calls.append((room_id, state))
        if self.fail_writes:
            raise RepositoryError()
        room = self.rooms.get(room_id)
        if room is None:
            return None
        room.state = state
        return room


@pytest.fixture
def repository() -> InMemoryRoomRepository:
    return InMemoryRoomRepository()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(token_secret=TEST_SECRET, rtc_url="wss://rtc.example.test")


@pytest.fixture
def room_payload() -> dict[str, object]:
    return {
        "name": "Standup",
        "capacity": 5,
        "startAt": "2025-01-01T09:00:00Z",
        "endAt": "2025-01-01T09:30:00Z",
        "timezone": "UTC",
        "recurring": False,
    }


@pytest.fixture
def signer() -> JwtTokenSigner:
    return JwtTokenSigner(TEST_SECRET)
