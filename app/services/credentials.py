"""
Credential Service - Client registration and login.

Registration stores one Argon2 hash per client id; login verifies the secret
and issues a bearer token. Unknown client ids and wrong secrets are
indistinguishable to the caller.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
from structlog import get_logger

from app.db.models import User
from app.exceptions import (
    MalformedHashError,
    MissingCredentialsError,
    TokenCreationError,
    UserAlreadyExistsError,
    WrongCredentialsError,
)
from app.models.api import AuthBody
from app.observability.metrics import metrics
from app.services.password_hashing import PasswordHashingService
from app.services.token import TokenService

logger = get_logger(__name__)


class CredentialService:
    """Registration and login against the users table."""

    def __init__(
        self,
        db: AsyncSession,
        hasher: PasswordHashingService,
        token_service: TokenService,
    ):
        self.db = db
        self.hasher = hasher
        self.token_service = token_service

    async def _get_user(self, client_id: str) -> User | None:
        stmt = select(User).where(User.client_id == client_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user(self, client_id: str, client_secret: str) -> None:
        """
        Register a new client credential.

        Registration is create-once: an existing client_id is rejected and its
        stored credential is left untouched.

        Raises:
            MissingCredentialsError: if either field is empty
            UserAlreadyExistsError: if client_id is already registered
        """
        if not client_id or not client_secret:
            metrics.record_auth_attempt("register", "missing_credentials")
            raise MissingCredentialsError()

        if await self._get_user(client_id) is not None:
            logger.warning("user_already_exists", client_id=client_id)
            metrics.record_auth_attempt("register", "conflict")
            raise UserAlreadyExistsError(client_id)

        password_hash = await run_in_threadpool(self.hasher.hash, client_secret)

        self.db.add(User(client_id=client_id, password_hash=password_hash))
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Concurrent registration of the same client_id won the race
            await self.db.rollback()
            logger.warning("user_already_exists", client_id=client_id, race=True)
            metrics.record_auth_attempt("register", "conflict")
            raise UserAlreadyExistsError(client_id) from e
        except SQLAlchemyError:
            await self.db.rollback()
            metrics.record_auth_attempt("register", "error")
            raise

        logger.info("user_registered", client_id=client_id)
        metrics.record_auth_attempt("register", "success")

    async def authorize(self, client_id: str, client_secret: str) -> AuthBody:
        """
        Verify a client's secret and issue a bearer token.

        Raises:
            MissingCredentialsError: if either field is empty
            WrongCredentialsError: unknown client_id or wrong secret
            TokenCreationError: stored hash is malformed or signing failed
        """
        if not client_id or not client_secret:
            metrics.record_auth_attempt("login", "missing_credentials")
            raise MissingCredentialsError()

        user = await self._get_user(client_id)

        if user is None:
            # Burn the same Argon2 work as a real verification
            await run_in_threadpool(self.hasher.verify_dummy, client_secret)
            logger.info("login_failed", client_id=client_id)
            metrics.record_auth_attempt("login", "wrong_credentials")
            raise WrongCredentialsError()

        try:
            verified = await run_in_threadpool(
                self.hasher.verify, user.password_hash, client_secret
            )
        except MalformedHashError as e:
            logger.error("stored_password_hash_malformed", client_id=client_id)
            metrics.record_auth_attempt("login", "error")
            raise TokenCreationError("stored credential is unreadable") from e

        if not verified:
            logger.info("login_failed", client_id=client_id)
            metrics.record_auth_attempt("login", "wrong_credentials")
            raise WrongCredentialsError()

        access_token = self.token_service.issue(client_id)

        logger.info("login_succeeded", client_id=client_id)
        metrics.record_auth_attempt("login", "success")

        return AuthBody(access_token=access_token)
