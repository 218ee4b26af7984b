"""
Password Hashing Service - Argon2id hashing and verification of client secrets.

Hashes are stored as PHC strings ($argon2id$v=19$m=...,t=...,p=...$salt$digest),
so every stored hash carries the parameters and salt needed to verify it.
"""

import secrets
from functools import cached_property

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from structlog import get_logger

from app.config import get_settings
from app.exceptions import MalformedHashError
from app.observability.metrics import track_hash_duration

logger = get_logger(__name__)


class PasswordHashingService:
    """One-way salted hashing of client secrets."""

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ):
        self.password_hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=Type.ID,
        )

    @classmethod
    def from_settings(cls) -> "PasswordHashingService":
        """Build a hasher with the configured Argon2 cost parameters."""
        settings = get_settings()
        return cls(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
        )

    @cached_property
    def dummy_hash(self) -> str:
        """Hash of a random secret, verified against when a client id is unknown."""
        return self.hash(secrets.token_urlsafe(32))

    def hash(self, secret: str) -> str:
        """
        Hash a secret with a fresh random salt.

        Returns:
            PHC-encoded hash string; never the same twice for the same secret
        """
        with track_hash_duration("hash"):
            return self.password_hasher.hash(secret)

    def verify(self, hash_string: str, secret: str) -> bool:
        """
        Verify a secret against a stored hash.

        Returns:
            True if the secret matches, False on mismatch

        Raises:
            MalformedHashError: if hash_string is not a valid encoded hash
        """
        try:
            with track_hash_duration("verify"):
                return self.password_hasher.verify(hash_string, secret)
        except VerifyMismatchError:
            return False
        except InvalidHashError as e:
            logger.error("password_hash_malformed", error=str(e))
            raise MalformedHashError(str(e)) from e
        except VerificationError as e:
            logger.warning("password_verification_failed", error=str(e))
            return False

    def verify_dummy(self, secret: str) -> bool:
        """
        Verify against the dummy hash; always False.

        The dummy hash is built on first use, so call this off the event loop.
        """
        return self.verify(self.dummy_hash, secret)

    def needs_rehash(self, hash_string: str) -> bool:
        """Whether a stored hash was produced with different cost parameters."""
        try:
            return self.password_hasher.check_needs_rehash(hash_string)
        except InvalidHashError as e:
            raise MalformedHashError(str(e)) from e
