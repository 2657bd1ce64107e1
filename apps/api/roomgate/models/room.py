"""Room model."""
from __future__ import annotations

from datetime import datetime, timezone
import enum

from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

DEFAULT_CAPACITY = 11
MAX_CAPACITY = 11


class RoomState(str, enum.Enum):
    SCHEDULED = "scheduled"
    CLOSED = "closed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Room(Base):
    """Schedulable meeting room and its join lifecycle."""

    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint(f"capacity BETWEEN 1 AND {MAX_CAPACITY}", name="ck_rooms_capacity"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, default=DEFAULT_CAPACITY, nullable=False)
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    timezone: Mapped[str] = mapped_column(String, nullable=False)
    recurring: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    state: Mapped[RoomState] = mapped_column(
        Enum(RoomState, name="room_state", values_callable=lambda states: [state.value for state in states]),
        default=RoomState.SCHEDULED,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)

    @property
    def is_joinable(self) -> bool:
        return self.state != RoomState.CLOSED
