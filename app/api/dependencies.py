"""
FastAPI Dependencies - Bearer token authorization and service wiring.

Handlers that change data declare `claims: TokenClaims = Depends(get_current_claims)`;
the token is validated before the handler body runs.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from app.db.session import get_db
from app.exceptions import InvalidTokenError, MissingCredentialsError
from app.models.domain import TokenClaims
from app.observability.metrics import metrics
from app.services.credentials import CredentialService
from app.services.password_hashing import PasswordHashingService
from app.services.token import TokenService

logger = get_logger(__name__)

# Bearer token scheme; a missing header is reported by get_current_claims
bearer_scheme = HTTPBearer(auto_error=False)

_password_hasher: PasswordHashingService | None = None


def get_token_service(request: Request) -> TokenService:
    """The process-wide token service created at startup."""
    token_service: TokenService = request.app.state.token_service
    return token_service


def get_password_hasher() -> PasswordHashingService:
    """Shared Argon2 hasher built from settings."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = PasswordHashingService.from_settings()
    return _password_hasher


def get_credential_service(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHashingService = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service),
) -> CredentialService:
    """Credential service bound to the request's session."""
    return CredentialService(db, hasher, token_service)


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Authorization gate for protected routes.

    Accepts: Authorization: Bearer {token}

    Raises:
        MissingCredentialsError: no bearer header (400)
        InvalidTokenError: bad signature, malformed or expired token (400)
    """
    if credentials is None or not credentials.credentials:
        metrics.record_token_validation("missing")
        raise MissingCredentialsError()

    try:
        claims = token_service.validate(credentials.credentials)
    except InvalidTokenError:
        metrics.record_token_validation("invalid")
        raise

    metrics.record_token_validation("valid")
    logger.debug("token_validated", subject=claims.subject)
    return claims
