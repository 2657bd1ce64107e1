"""Room lifecycle management.

Rooms start out ``scheduled`` and can only move forward to ``closed``. All reads
and writes go through a ``RoomRepository`` so the state machine stays independent
of the backing store.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from ..core.errors import NotFoundError, ValidationError
from ..models.room import Room, RoomState
from ..repositories.rooms import RoomRepository
from ..schemas import rooms as schemas

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class RoomLifecycleManager:
    """Create, look up, and close rooms."""

    def __init__(self, repository: RoomRepository) -> None:
        self._repository = repository

    async def create(self, payload: Mapping[str, Any] | schemas.RoomCreate) -> Room:
        """Validate the input and persist a new scheduled room."""

        data = parse_payload(schemas.RoomCreate, payload, message="Invalid room data")
        room = Room(
            id=_new_room_id(),
            name=data.name,
            capacity=data.capacity,
            start_at=data.start_at,
            end_at=data.end_at,
            timezone=data.timezone,
            recurring=data.recurring,
            state=RoomState.SCHEDULED,
        )
        created = await self._repository.insert(room)
        logger.info("Created room %s (capacity=%s)", created.id, created.capacity)
        return created

    async def get(self, room_id: str) -> Room:
        """Return the room or raise ``NotFoundError``."""

        room = await self._repository.get_by_id(room_id)
        if room is None:
            raise NotFoundError()
        return room

    async def close(self, room_id: str) -> Room:
        """Close the room; closing an already closed room returns it unchanged."""

        room = await self.get(room_id)
        if room.state == RoomState.CLOSED:
            logger.info("Room %s already closed", room_id)
            return room

        updated = await self._repository.update_state(room_id, RoomState.CLOSED)
        if updated is None:
            raise NotFoundError()
        logger.info("Closed room %s", room_id)
        return updated


def parse_payload(model: type[ModelT], payload: object, *, message: str) -> ModelT:
    """Validate a raw request body into ``model`` or raise ``ValidationError``."""

    if isinstance(payload, model):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationError(message, details=[{"loc": [], "msg": "Request body must be an object"}])
    try:
        return model.model_validate(dict(payload))
    except SchemaValidationError as exc:
        details = [
            {"loc": list(error["loc"]), "msg": error["msg"]}
            for error in exc.errors(include_url=False, include_input=False)
        ]
        raise ValidationError(message, details=details) from exc


def _new_room_id() -> str:
    return str(uuid4())
