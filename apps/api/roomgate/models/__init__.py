"""Expose ORM models."""
from .room import Room, RoomState

__all__ = [
    "Room",
    "RoomState",
]
