"""
Tests for the exception hierarchy.

Messages and status codes are part of the API contract.
"""

import pytest

from app.exceptions import (
    EmptyResultError,
    FuelPriceError,
    InvalidTokenError,
    MissingCredentialsError,
    ResourceError,
    ResourceKind,
    ResourceOperation,
    TokenCreationError,
    UserAlreadyExistsError,
    WrongCredentialsError,
)


class TestAuthErrors:
    """Status codes and messages for auth failures."""

    @pytest.mark.parametrize(
        "error,status_code,message",
        [
            (MissingCredentialsError(), 400, "Missing credentials"),
            (WrongCredentialsError(), 401, "Wrong credentials"),
            (InvalidTokenError("expired"), 400, "Invalid token"),
            (TokenCreationError(), 500, "Token creation error"),
            (UserAlreadyExistsError("scraper"), 400, "User already exists"),
        ],
    )
    def test_status_and_message(self, error: FuelPriceError, status_code: int, message: str):
        assert error.status_code == status_code
        assert error.message == message
        assert str(error) == message

    def test_invalid_token_reason_not_in_message(self):
        """The reason is kept for logs; clients only see "Invalid token"."""
        error = InvalidTokenError("Signature verification failed")
        assert error.reason == "Signature verification failed"
        assert "Signature" not in error.message


class TestResourceError:
    """Messages and status codes for resource failures."""

    def test_not_found(self):
        error = ResourceError.not_found(ResourceKind.PROVIDER)
        assert error.status_code == 404
        assert error.message == "provider not found"
        assert error.is_not_found

    @pytest.mark.parametrize(
        "factory,verb",
        [
            (ResourceError.insert_error, "inserting"),
            (ResourceError.fetch_error, "fetching"),
            (ResourceError.update_error, "updating"),
            (ResourceError.delete_error, "deleting"),
        ],
    )
    def test_store_errors_embed_cause(self, factory, verb: str):
        error = factory(ResourceKind.DELIVERY_ZONE, RuntimeError("boom"))
        assert error.status_code == 500
        assert error.message == f"Error while {verb} delivery zone: boom"
        assert not error.is_not_found

    def test_fetch_error_without_cause(self):
        error = ResourceError.fetch_error(ResourceKind.PRICE)
        assert error.message == "Error while fetching price"

    def test_empty_result(self):
        error = ResourceError.fetch_error(ResourceKind.SCRAPING_RUN, EmptyResultError())
        assert error.operation is ResourceOperation.FETCH
        assert error.message == (
            "Error while fetching scraping run: "
            "no rows returned by a query that expected to return at least one row"
        )

    def test_not_found_with_resource_cause(self):
        zone_error = ResourceError.not_found(ResourceKind.DELIVERY_ZONE)
        error = ResourceError.not_found(ResourceKind.PROVIDER, cause=zone_error)
        assert error.message == "delivery zone not found for provider"
        assert error.status_code == 404
