"""
Auth API routes - Client registration and login.

Both endpoints are public; every other write endpoint requires the bearer
token issued by /auth/login.
"""

from fastapi import APIRouter, Depends
from structlog import get_logger

from app.api.dependencies import get_credential_service
from app.models.api import AuthBody, AuthPayload, ErrorResponse, MessageResponse
from app.services.credentials import CredentialService

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/create",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}},
)
async def create_user(
    payload: AuthPayload,
    credentials: CredentialService = Depends(get_credential_service),
) -> MessageResponse:
    """
    Register a client credential.

    Errors:
        400: Missing credentials / User already exists
    """
    await credentials.create_user(payload.client_id, payload.client_secret)
    return MessageResponse(message="User created successfully")


@router.post(
    "/login",
    response_model=AuthBody,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def login(
    payload: AuthPayload,
    credentials: CredentialService = Depends(get_credential_service),
) -> AuthBody:
    """
    Exchange a client id and secret for a bearer token.

    Errors:
        400: Missing credentials
        401: Wrong credentials
    """
    return await credentials.authorize(payload.client_id, payload.client_secret)
