"""
Exception Classes - Strongly typed exception hierarchy.

Every error carries the HTTP status code and the user-facing message it is
rendered with; the handlers in app.main turn them into {"error": message}.
"""

from enum import Enum


class FuelPriceError(Exception):
    """Base exception for all application errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# ============================================================================
# Auth Errors
# ============================================================================


class AuthError(FuelPriceError):
    """Base class for credential and token failures."""

    pass


class MissingCredentialsError(AuthError):
    """Raised when client_id/client_secret or the bearer header is absent."""

    status_code = 400

    def __init__(self) -> None:
        super().__init__("Missing credentials")


class WrongCredentialsError(AuthError):
    """
    Raised when login fails.

    Unknown client ids and wrong secrets raise this same error so callers
    cannot tell which one happened.
    """

    status_code = 401

    def __init__(self) -> None:
        super().__init__("Wrong credentials")


class InvalidTokenError(AuthError):
    """Raised when a bearer token is malformed, tampered with or expired."""

    status_code = 400

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__("Invalid token")


class TokenCreationError(AuthError):
    """Raised when a token cannot be signed."""

    status_code = 500

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__("Token creation error")


class UserAlreadyExistsError(AuthError):
    """Raised when registering a client_id that already has a credential."""

    status_code = 400

    def __init__(self, client_id: str) -> None:
        self.client_id = client_id
        super().__init__("User already exists")


class MalformedHashError(FuelPriceError):
    """Raised when a stored password hash is not a valid encoded hash."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Malformed password hash: {detail}")


# ============================================================================
# Resource Errors
# ============================================================================


class ResourceKind(str, Enum):
    """Resource names used in user-facing messages."""

    PROVIDER = "provider"
    DELIVERY_ZONE = "delivery zone"
    PRICE = "price"
    SCRAPING_RUN = "scraping run"


class ResourceOperation(str, Enum):
    """What was being done to a resource when it failed."""

    INSERT = "insert"
    FETCH = "fetch"
    UPDATE = "update"
    DELETE = "delete"
    NOT_FOUND = "not_found"


_OPERATION_VERBS = {
    ResourceOperation.INSERT: "inserting",
    ResourceOperation.FETCH: "fetching",
    ResourceOperation.UPDATE: "updating",
    ResourceOperation.DELETE: "deleting",
}


class ResourceError(FuelPriceError):
    """
    Failure of an operation on one resource collection.

    One class covers every resource and operation. Store failures are 500s
    and embed the store's error text; NOT_FOUND is a 404.
    """

    def __init__(
        self,
        resource: ResourceKind,
        operation: ResourceOperation,
        cause: BaseException | None = None,
    ) -> None:
        self.resource = resource
        self.operation = operation
        self.cause = cause

        if operation is ResourceOperation.NOT_FOUND:
            self.status_code = 404
            if isinstance(cause, ResourceError):
                message = f"{cause.message} for {resource.value}"
            else:
                message = f"{resource.value} not found"
        else:
            self.status_code = 500
            message = f"Error while {_OPERATION_VERBS[operation]} {resource.value}"
            if cause is not None:
                message = f"{message}: {cause}"

        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.operation is ResourceOperation.NOT_FOUND

    @classmethod
    def insert_error(cls, resource: ResourceKind, cause: BaseException) -> "ResourceError":
        return cls(resource, ResourceOperation.INSERT, cause)

    @classmethod
    def fetch_error(
        cls, resource: ResourceKind, cause: BaseException | None = None
    ) -> "ResourceError":
        return cls(resource, ResourceOperation.FETCH, cause)

    @classmethod
    def update_error(cls, resource: ResourceKind, cause: BaseException) -> "ResourceError":
        return cls(resource, ResourceOperation.UPDATE, cause)

    @classmethod
    def delete_error(cls, resource: ResourceKind, cause: BaseException) -> "ResourceError":
        return cls(resource, ResourceOperation.DELETE, cause)

    @classmethod
    def not_found(
        cls, resource: ResourceKind, cause: BaseException | None = None
    ) -> "ResourceError":
        return cls(resource, ResourceOperation.NOT_FOUND, cause)


class EmptyResultError(Exception):
    """Raised when a query that promises exactly one row returns none."""

    def __init__(self) -> None:
        super().__init__("no rows returned by a query that expected to return at least one row")
