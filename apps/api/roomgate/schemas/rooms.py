"""Data contracts for room and token endpoints."""
from __future__ import annotations

from datetime import datetime
import enum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator

from ..models.room import DEFAULT_CAPACITY, MAX_CAPACITY, RoomState


class ParticipantRole(str, enum.Enum):
    HOST = "host"
    COHOST = "cohost"
    PARTICIPANT = "participant"


class RoomCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1, max_length=100, strict=True)
    capacity: int = Field(default=DEFAULT_CAPACITY, ge=1, le=MAX_CAPACITY, strict=True)
    start_at: AwareDatetime = Field(..., alias="startAt")
    end_at: AwareDatetime = Field(..., alias="endAt")
    timezone: str = Field(..., strict=True)
    recurring: bool = Field(default=False, strict=True)

    @field_validator("start_at", "end_at", mode="before")
    @classmethod
    def _require_iso_string(cls, value: object) -> object:
        """Only accept ISO-8601 strings or datetimes, never bare epoch numbers."""

        if isinstance(value, (str, datetime)):
            return value
        raise ValueError("must be an ISO-8601 date-time string")


class RoomRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    capacity: int
    start_at: datetime = Field(..., alias="startAt")
    end_at: datetime = Field(..., alias="endAt")
    timezone: str
    recurring: bool
    state: RoomState
    created_at: datetime | None = Field(default=None, alias="createdAt")


class TokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    role: ParticipantRole
    display_name: str = Field(..., alias="displayName", min_length=1, max_length=50, strict=True)


class TokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., description="Signed JWT scoped to the room")
    expires_at: datetime = Field(..., alias="expiresAt")
    url: str | None = Field(default=None, description="Real-time endpoint to connect to")
