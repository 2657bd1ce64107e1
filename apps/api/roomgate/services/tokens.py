"""Room access token issuance.

A token binds a room, a role, and a display identity, and expires a fixed time
after signing. Tokens are stateless: closing a room stops new tokens from being
issued but does not revoke the ones already handed out.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import nh3

from ..core.config import Settings
from ..core.errors import InvalidTokenError, NotFoundError, RoomUnavailableError
from ..schemas import rooms as schemas
from .rooms import RoomLifecycleManager, parse_payload
from .signing import JwtTokenSigner, TokenSigner

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(slots=True)
class IssuedToken:
    token: str
    expires_at: datetime
    url: str | None = None


@dataclass(slots=True)
class TokenClaims:
    room_id: str
    role: schemas.ParticipantRole
    identity: str
    issued_at: datetime
    expires_at: datetime


def sanitize_display_name(value: str) -> str:
    """Strip every tag and attribute. Kept text comes back HTML-escaped (``&`` becomes ``&amp;``)."""

    return nh3.clean(value, tags=set(), attributes={})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Decide whether a join is allowed right now and mint the credential."""

    def __init__(
        self,
        rooms: RoomLifecycleManager,
        signer: TokenSigner,
        *,
        ttl: timedelta = timedelta(minutes=15),
        url: str | None = None,
        clock: Clock = _utcnow,
    ) -> None:
        self._rooms = rooms
        self._signer = signer
        self._ttl = ttl
        self._url = url
        self._clock = clock

    @classmethod
    def from_settings(cls, rooms: RoomLifecycleManager, settings: Settings) -> "TokenIssuer":
        """Build an issuer from configuration; raises ``SigningError`` if signing is misconfigured."""

        signer = JwtTokenSigner(settings.token_secret, settings.token_algorithm)
        return cls(
            rooms,
            signer,
            ttl=timedelta(minutes=settings.token_ttl_minutes),
            url=settings.rtc_url,
        )

    async def issue_token(self, room_id: str, payload: Mapping[str, Any] | schemas.TokenRequest) -> IssuedToken:
        """Mint a token for ``room_id`` if the room exists and is not closed."""

        data = parse_payload(schemas.TokenRequest, payload, message="Invalid token data")

        try:
            room = await self._rooms.get(room_id)
        except NotFoundError:
            room = None
        if room is None or not room.is_joinable:
            logger.warning("Token request rejected for unavailable room %s", room_id)
            raise RoomUnavailableError()

        identity = sanitize_display_name(data.display_name)
        issued_at = self._clock()
        claims = {"roomId": room.id, "role": data.role.value, "identity": identity}
        token = self._signer.sign(claims, issued_at=issued_at, expires_in=self._ttl)

        logger.info("Issued %s token for room %s", data.role.value, room.id)
        return IssuedToken(token=token, expires_at=issued_at + self._ttl, url=self._url)

    def verify(self, token: str) -> TokenClaims:
        """Decode a previously issued token; raises ``InvalidTokenError`` if it is bad or expired."""

        claims = self._signer.verify(token)
        try:
            return TokenClaims(
                room_id=claims["roomId"],
                role=schemas.ParticipantRole(claims["role"]),
                identity=claims["identity"],
                issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
            )
        except (KeyError, ValueError) as exc:
            raise InvalidTokenError() from exc
