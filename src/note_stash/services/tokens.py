"""Issuing and decoding signed, time-bounded bearer tokens."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

from jose import jwt
from jose.exceptions import JOSEError

from note_stash.core.errors import InvalidSignature, MalformedToken, TokenError
from note_stash.core.settings import settings
from note_stash.db.time import utcnow

__all__ = ["TokenClaims", "TokenService", "get_token_service"]


@dataclass(frozen=True)
class TokenClaims:
    """Claims recovered from a verified token."""

    subject: str
    expires_at: datetime
    issued_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class TokenService:
    """Issue access/refresh tokens and decode them back into claims.

    Both kinds share the ``{sub, iat, exp}`` claim set and differ only in
    lifetime. Signature verification and expiry checking are separate steps:
    :meth:`decode` never looks at ``exp``, :meth:`is_expired` does.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("A signing key is required")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._clock = clock
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def issue_access(self, subject: str) -> str:
        """Return a short-lived token authorizing requests for ``subject``."""
        return self._issue(subject, self.access_ttl)

    def issue_refresh(self, subject: str) -> str:
        """Return a long-lived token that can only mint new access tokens."""
        return self._issue(subject, self.refresh_ttl)

    def decode(self, token: str) -> TokenClaims:
        """Verify ``token`` and return its claims without checking expiry.

        Raises:
            MalformedToken: If the token or its ``sub``/``exp`` claims cannot be parsed.
            InvalidSignature: If the signature does not verify under the signing key.
        """
        try:
            unverified = jwt.get_unverified_claims(token)
        except (JOSEError, TypeError, ValueError) as err:
            raise MalformedToken("Token could not be parsed") from err
        subject, expires_at, issued_at = _parse_claims(unverified)

        try:
            jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_nbf": False, "verify_aud": False},
            )
        except JOSEError as err:
            raise InvalidSignature("Token signature verification failed") from err

        return TokenClaims(subject=subject, expires_at=expires_at, issued_at=issued_at)

    def now(self) -> datetime:
        """Return the current time as seen by this service."""
        return self._clock()

    def is_expired(self, token: str) -> bool:
        """Return True if ``token`` is past its expiry or cannot be verified at all."""
        try:
            claims = self.decode(token)
        except TokenError:
            return True
        return claims.is_expired(self._clock())

    def _issue(self, subject: str, ttl: timedelta) -> str:
        now = self._clock()
        to_encode: dict[str, Any] = {
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        encoded_jwt: str = jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)
        return encoded_jwt


def _parse_claims(claims: dict[str, Any]) -> tuple[str, datetime, datetime | None]:
    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise MalformedToken("Token has no subject")
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, int | float):
        raise MalformedToken("Token has no expiry")
    iat = claims.get("iat")
    try:
        expires_at = datetime.fromtimestamp(exp, UTC)
        issued_at = None
        if isinstance(iat, int | float) and not isinstance(iat, bool):
            issued_at = datetime.fromtimestamp(iat, UTC)
    except (OverflowError, OSError, ValueError) as err:
        raise MalformedToken("Token timestamps are out of range") from err
    return subject, expires_at, issued_at


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """Return the process-wide token service built from settings."""
    return TokenService(
        settings.secret_key,
        access_ttl=timedelta(seconds=settings.access_token_ttl_seconds),
        refresh_ttl=timedelta(seconds=settings.refresh_token_ttl_seconds),
        algorithm=settings.jwt_algorithm,
    )
