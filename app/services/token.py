"""
Token Service - Issues and validates signed, time-bounded bearer tokens.

The signing key is random, generated once per process, and never persisted:
restarting the API invalidates every outstanding token.
"""

import secrets
import string
from datetime import UTC, datetime, timedelta

import jwt
from structlog import get_logger

from app.config import MIN_TOKEN_KEY_LENGTH, get_settings
from app.exceptions import InvalidTokenError, TokenCreationError
from app.models.domain import TokenClaims

logger = get_logger(__name__)

_KEY_ALPHABET = string.ascii_letters + string.digits


def generate_signing_key(length: int = 64) -> str:
    """Generate a random alphanumeric signing key."""
    if length < MIN_TOKEN_KEY_LENGTH:
        raise ValueError(f"Signing key must be at least {MIN_TOKEN_KEY_LENGTH} characters")
    return "".join(secrets.choice(_KEY_ALPHABET) for _ in range(length))


class TokenService:
    """Issue and validate HS256 bearer tokens keyed to a client id."""

    def __init__(
        self,
        signing_key: str,
        expire_days: int = 30,
        algorithm: str = "HS256",
    ):
        if not signing_key:
            raise ValueError("signing_key cannot be empty")
        self._signing_key = signing_key
        self.expire_days = expire_days
        self.algorithm = algorithm

    @classmethod
    def with_random_key(cls) -> "TokenService":
        """Build the process-wide token service with a freshly generated key."""
        settings = get_settings()
        return cls(
            signing_key=generate_signing_key(settings.token_key_length),
            expire_days=settings.token_expire_days,
            algorithm=settings.token_algorithm,
        )

    def issue(self, subject: str, expires_in: timedelta | None = None) -> str:
        """
        Issue a signed token for a client id.

        Args:
            subject: The client id the token is keyed to
            expires_in: Lifetime override (default: expire_days)

        Returns:
            Compact serialized JWT

        Raises:
            TokenCreationError: if the token cannot be signed
        """
        now = datetime.now(UTC)
        lifetime = expires_in if expires_in is not None else timedelta(days=self.expire_days)
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + lifetime,
        }

        try:
            return jwt.encode(payload, self._signing_key, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError, NotImplementedError) as e:
            logger.error("token_creation_failed", error=str(e))
            raise TokenCreationError(str(e)) from e

    def validate(self, token: str) -> TokenClaims:
        """
        Verify a token's signature and expiry and return its claims.

        Expiry is always checked, independently of library defaults.

        Raises:
            InvalidTokenError: bad signature, malformed token, or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._signing_key,
                algorithms=[self.algorithm],
                options={
                    "require": ["exp", "sub"],
                    "verify_signature": True,
                    "verify_exp": True,
                },
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("token_expired")
            raise InvalidTokenError("expired") from e
        except jwt.InvalidTokenError as e:
            logger.warning("token_invalid", error=str(e))
            raise InvalidTokenError(str(e)) from e

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("missing subject")

        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
        if expires_at <= datetime.now(UTC):
            logger.info("token_expired")
            raise InvalidTokenError("expired")

        issued_at = None
        if "iat" in payload:
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=UTC)

        return TokenClaims(subject=subject, expires_at=expires_at, issued_at=issued_at)
