"""Security utilities for JWT and password handling."""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from functools import cached_property
from typing import Dict, Optional

import bcrypt
from fastapi import Response
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from tracker.core.config import Settings
from tracker.core.errors import ConfigurationError, HashError, TokenExpired, TokenInvalid
from tracker.user.schemas import SessionUser

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72
DEFAULT_TOKEN_TTL = timedelta(hours=24)


class PasswordHasher:
    """Salted bcrypt hashing of user passwords."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Generate a salted bcrypt hash of the password."""
        if not isinstance(password, str) or not password:
            raise HashError("Password must be a non-empty string")
        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            raise HashError(f"Password longer than {BCRYPT_MAX_BYTES} bytes")
        try:
            hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds))
        except ValueError as exc:
            raise HashError(str(exc)) from exc
        return hashed.decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its hash. Never raises on mismatch."""
        if not isinstance(password, str) or not isinstance(hashed_password, str):
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            return False

    def verify_dummy(self, password: str) -> bool:
        """Spend the cost of a verify when there is no stored hash to check."""
        self.verify(password, self._dummy_hash)
        return False

    @cached_property
    def _dummy_hash(self) -> str:
        return self.hash(secrets.token_urlsafe(16))


class TokenService:
    """Issues and verifies signed, time-bounded session tokens."""

    def __init__(
        self,
        secret: Optional[str],
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TOKEN_TTL,
    ):
        if not secret:
            raise ConfigurationError("JWT_SECRET is not configured")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def issue(self, user: SessionUser, now: Optional[datetime] = None) -> str:
        """Create a token asserting the user's identity, expiring after the TTL."""
        issued_at = now or datetime.now(timezone.utc)
        to_encode: Dict = user.model_dump()
        to_encode.update({"iat": issued_at, "exp": issued_at + self.ttl})
        return jwt.encode(to_encode, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionUser:
        """
        Verify signature and expiry and return the embedded identity.

        Raises TokenExpired past the expiry and TokenInvalid for anything
        else that does not check out.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            logger.warning("Token rejected: expired")
            raise TokenExpired() from exc
        except JWTError as exc:
            logger.warning(f"Token rejected: {exc}")
            raise TokenInvalid() from exc

        if "exp" not in payload:
            logger.warning("Token rejected: no expiry claim")
            raise TokenInvalid()
        try:
            return SessionUser(id=payload["id"], username=payload["username"])
        except (KeyError, PydanticValidationError) as exc:
            logger.warning("Token rejected: identity claims missing or malformed")
            raise TokenInvalid() from exc


class SessionCookie:
    """Carries the session token in an HTTP-only cookie."""

    def __init__(self, name: str = "token", max_age: int = 86400, secure: bool = False):
        self.name = name
        self.max_age = max_age
        self.secure = secure

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionCookie":
        return cls(settings.COOKIE_NAME, settings.session_max_age, settings.COOKIE_SECURE)

    def set(self, response: Response, token: str) -> None:
        response.set_cookie(
            self.name,
            token,
            max_age=self.max_age,
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )

    def clear(self, response: Response) -> None:
        response.set_cookie(
            self.name,
            "",
            max_age=-1,
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )
