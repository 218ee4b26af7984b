"""
Tests for TokenService.

Covers issuing, validation, expiry, tampering and signing key generation.
"""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from app.exceptions import InvalidTokenError, TokenCreationError
from app.services.token import TokenService, generate_signing_key


class TestGenerateSigningKey:
    """Tests for generate_signing_key()."""

    def test_default_length(self):
        assert len(generate_signing_key()) == 64

    def test_alphanumeric(self):
        assert generate_signing_key(80).isalnum()

    def test_keys_are_random(self):
        assert generate_signing_key() != generate_signing_key()

    def test_rejects_short_keys(self):
        with pytest.raises(ValueError):
            generate_signing_key(59)

    def test_minimum_length_accepted(self):
        assert len(generate_signing_key(60)) == 60


class TestIssueAndValidate:
    """Tests for issue() and validate()."""

    def test_round_trip(self, token_service: TokenService):
        """A freshly issued token validates to its subject."""
        token = token_service.issue("scraper")
        claims = token_service.validate(token)

        assert claims.subject == "scraper"
        assert claims.expires_at > datetime.now(UTC)

    def test_default_expiry_is_thirty_days(self, token_service: TokenService):
        claims = token_service.validate(token_service.issue("scraper"))
        remaining = claims.expires_at - datetime.now(UTC)

        assert timedelta(days=29, hours=23) < remaining <= timedelta(days=30)

    def test_expired_token_rejected(self, token_service: TokenService):
        token = token_service.issue("scraper", expires_in=timedelta(seconds=-5))

        with pytest.raises(InvalidTokenError) as exc_info:
            token_service.validate(token)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid token"

    def test_tampered_signature_rejected(self, token_service: TokenService):
        token = token_service.issue("scraper")
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[:-2]}{'AA' if signature[-2:] != 'AA' else 'BB'}"

        with pytest.raises(InvalidTokenError):
            token_service.validate(tampered)

    def test_token_from_other_key_rejected(self, token_service: TokenService):
        """A restart generates a new key, invalidating old tokens."""
        other = TokenService(signing_key=generate_signing_key())
        token = other.issue("scraper")

        with pytest.raises(InvalidTokenError):
            token_service.validate(token)

    def test_garbage_rejected(self, token_service: TokenService):
        with pytest.raises(InvalidTokenError):
            token_service.validate("not.a.token")

    def test_missing_exp_rejected(self, token_service: TokenService, signing_key: str):
        token = jwt.encode({"sub": "scraper"}, signing_key, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            token_service.validate(token)

    def test_missing_sub_rejected(self, token_service: TokenService, signing_key: str):
        exp = datetime.now(UTC) + timedelta(days=1)
        token = jwt.encode({"exp": exp}, signing_key, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            token_service.validate(token)

    def test_empty_sub_rejected(self, token_service: TokenService, signing_key: str):
        exp = datetime.now(UTC) + timedelta(days=1)
        token = jwt.encode({"sub": "", "exp": exp}, signing_key, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            token_service.validate(token)

    def test_unsigned_token_rejected(self, token_service: TokenService):
        exp = datetime.now(UTC) + timedelta(days=1)
        token = jwt.encode({"sub": "scraper", "exp": exp}, None, algorithm="none")

        with pytest.raises(InvalidTokenError):
            token_service.validate(token)


class TestTokenServiceConstruction:
    """Tests for building the service."""

    def test_empty_key_rejected(self):
        with pytest.raises(ValueError):
            TokenService(signing_key="")

    def test_with_random_key_uses_settings(self):
        service = TokenService.with_random_key()

        assert service.expire_days == 30
        assert service.algorithm == "HS256"
        assert service.validate(service.issue("scraper")).subject == "scraper"

    def test_unknown_algorithm_is_creation_error(self, signing_key: str):
        service = TokenService(signing_key=signing_key, algorithm="HS999")

        with pytest.raises(TokenCreationError):
            service.issue("scraper")
