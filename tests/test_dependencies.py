"""
Tests for API Dependencies.

Tests the bearer token authorization gate.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from app.api.dependencies import get_current_claims, get_password_hasher, get_token_service
from app.exceptions import InvalidTokenError, MissingCredentialsError
from app.services.token import TokenService


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentClaims:
    """Tests for get_current_claims."""

    async def test_missing_header_is_missing_credentials(self, token_service: TokenService):
        with pytest.raises(MissingCredentialsError) as exc_info:
            await get_current_claims(credentials=None, token_service=token_service)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Missing credentials"

    async def test_empty_token_is_missing_credentials(self, token_service: TokenService):
        with pytest.raises(MissingCredentialsError):
            await get_current_claims(credentials=bearer(""), token_service=token_service)

    async def test_invalid_token_rejected(self, token_service: TokenService):
        with pytest.raises(InvalidTokenError):
            await get_current_claims(credentials=bearer("garbage"), token_service=token_service)

    async def test_expired_token_rejected(self, token_service: TokenService):
        token = token_service.issue("scraper", expires_in=timedelta(seconds=-1))

        with pytest.raises(InvalidTokenError):
            await get_current_claims(credentials=bearer(token), token_service=token_service)

    async def test_valid_token_returns_claims(self, token_service: TokenService):
        token = token_service.issue("scraper")

        claims = await get_current_claims(credentials=bearer(token), token_service=token_service)

        assert claims.subject == "scraper"


class TestServiceWiring:
    """Tests for the service providers."""

    def test_token_service_comes_from_app_state(self, token_service: TokenService):
        request = MagicMock()
        request.app.state.token_service = token_service

        assert get_token_service(request) is token_service

    def test_password_hasher_is_shared(self):
        assert get_password_hasher() is get_password_hasher()
