"""Room persistence helpers."""
from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import RepositoryError
from ..models.room import Room, RoomState

logger = logging.getLogger(__name__)


class RoomRepository(Protocol):
    """Storage operations the room lifecycle depends on."""

    async def insert(self, room: Room) -> Room: ...

    async def get_by_id(self, room_id: str) -> Room | None: ...

    async def update_state(self, room_id: str, state: RoomState) -> Room | None: ...


class SqlRoomRepository:
    """Room repository backed by an async SQLAlchemy session.

    Each call runs in its own transaction, so a failed write is rolled back before
    the error reaches the caller and never becomes visible to later reads.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(self, room: Room) -> Room:
        """Persist a new room and return it."""

        try:
            async with self._session.begin():
                self._session.add(room)
                await self._session.flush()
        except SQLAlchemyError as exc:
            logger.error("Failed to insert room %s: %s", room.id, exc)
            raise RepositoryError() from exc
        return room

    async def get_by_id(self, room_id: str) -> Room | None:
        """Return a room by identifier."""

        try:
            async with self._session.begin():
                return await self._session.get(Room, room_id)
        except SQLAlchemyError as exc:
            logger.error("Failed to load room %s: %s", room_id, exc)
            raise RepositoryError() from exc

    async def update_state(self, room_id: str, state: RoomState) -> Room | None:
        """Set the room state and return the updated record, or None if it does not exist."""

        stmt = (
            update(Room)
            .where(Room.id == room_id)
            .values(state=state)
            .returning(Room)
            .execution_options(populate_existing=True)
        )
        try:
            async with self._session.begin():
                result = await self._session.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error("Failed to update room %s to %s: %s", room_id, state.value, exc)
            raise RepositoryError() from exc
