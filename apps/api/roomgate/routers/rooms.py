"""Room lifecycle and token issuance endpoints."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings, get_settings
from ..db.session import get_session
from ..repositories.rooms import SqlRoomRepository
from ..schemas import rooms as rooms_schema
from ..services.rooms import RoomLifecycleManager
from ..services.tokens import TokenIssuer

router = APIRouter()


def get_room_manager(session: AsyncSession = Depends(get_session)) -> RoomLifecycleManager:
    """Build a lifecycle manager bound to the request's database session."""

    return RoomLifecycleManager(SqlRoomRepository(session))


def get_token_issuer(
    rooms: RoomLifecycleManager = Depends(get_room_manager),
    settings: Settings = Depends(get_settings),
) -> TokenIssuer:
    """Build a token issuer from the configured signing settings."""

    return TokenIssuer.from_settings(rooms, settings)


@router.post("", response_model=rooms_schema.RoomRead, status_code=status.HTTP_201_CREATED)
async def create_room(
    payload: Any = Body(...),
    rooms: RoomLifecycleManager = Depends(get_room_manager),
) -> rooms_schema.RoomRead:
    """Schedule a new room."""

    room = await rooms.create(payload)
    return rooms_schema.RoomRead.model_validate(room)


@router.get("/{room_id}", response_model=rooms_schema.RoomRead)
async def get_room(
    room_id: str,
    rooms: RoomLifecycleManager = Depends(get_room_manager),
) -> rooms_schema.RoomRead:
    """Return a room by id."""

    room = await rooms.get(room_id)
    return rooms_schema.RoomRead.model_validate(room)


@router.post("/{room_id}/tokens", response_model=rooms_schema.TokenResponse)
async def issue_token(
    room_id: str,
    payload: Any = Body(...),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> rooms_schema.TokenResponse:
    """Mint an access token for joining the room."""

    issued = await issuer.issue_token(room_id, payload)
    return rooms_schema.TokenResponse(token=issued.token, expires_at=issued.expires_at, url=issued.url)


@router.post("/{room_id}/close", response_model=rooms_schema.RoomRead)
async def close_room(
    room_id: str,
    rooms: RoomLifecycleManager = Depends(get_room_manager),
) -> rooms_schema.RoomRead:
    """Close the room so no further tokens are issued for it."""

    room = await rooms.close(room_id)
    return rooms_schema.RoomRead.model_validate(room)
