"""
API Models - Pydantic models for request/response validation.

All request and response bodies are strongly typed.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# ============================================================================
# Shared Models
# ============================================================================


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class ResourceChangeResponse(BaseModel):
    """Create/update/delete confirmation with the affected id."""

    id: int
    message: str


# ============================================================================
# Auth Models
# ============================================================================


class AuthPayload(BaseModel):
    """POST /auth/create and /auth/login request body.

    Empty strings are accepted here and rejected by the credential service
    with "Missing credentials".
    """

    client_id: str = Field("", max_length=255)
    client_secret: str = Field("", max_length=1024)


class AuthBody(BaseModel):
    """POST /auth/login response."""

    access_token: str
    token_type: Literal["Bearer"] = "Bearer"


# ============================================================================
# Provider Models
# ============================================================================


class ProviderCreate(BaseModel):
    """POST /providers request body."""

    name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1)
    html_element: str = Field(..., min_length=1, description="Selector for the price element")


class ProviderUpdate(ProviderCreate):
    """PUT /providers/{id} request body (full replacement)."""

    pass


class ProviderResponse(BaseModel):
    """A provider."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    url: str
    html_element: str
    created_at: datetime
    last_updated: datetime
    last_accessed: datetime


class DeliveryZoneResponse(BaseModel):
    """A delivery zone."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str


class ProviderWithZonesResponse(ProviderResponse):
    """A provider with the zones it delivers to."""

    zones: list[DeliveryZoneResponse] = Field(default_factory=list)


class ZoneAssignmentRequest(BaseModel):
    """POST /providers/{id}/zones request body."""

    zone_ids: list[int] = Field(..., min_length=1)


# ============================================================================
# Delivery Zone Models
# ============================================================================


class DeliveryZoneCreate(BaseModel):
    """POST /delivery-zones request body."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""


class DeliveryZoneUpdate(DeliveryZoneCreate):
    """PUT /delivery-zones/{id} request body."""

    pass


# ============================================================================
# Price Models
# ============================================================================


class PriceCreate(BaseModel):
    """POST /providers/{id}/prices request body."""

    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=3)


class PriceResponse(BaseModel):
    """A recorded price."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    provider_id: int
    price: Decimal
    created_at: datetime


class PriceDetails(BaseModel):
    """A price point in a provider's history."""

    model_config = ConfigDict(from_attributes=True)

    price: Decimal
    created_at: datetime


class PriceQueryParams(BaseModel):
    """Query parameters for GET /providers/{id}/prices."""

    limit: int = Field(1000, gt=0, le=10000)
    offset: int = Field(0, ge=0)
    start: datetime | None = None
    end: datetime | None = None

    @model_validator(mode="after")
    def validate_window(self) -> "PriceQueryParams":
        """Ensure start precedes end when both are given."""
        self.start = as_utc(self.start)
        self.end = as_utc(self.end)
        if self.start is not None and self.end is not None and self.start >= self.end:
            raise ValueError("start must be before end")
        return self


# ============================================================================
# Scraping Run Models
# ============================================================================


class ScrapingRunCreate(BaseModel):
    """POST /scraping-runs request body."""

    start_time: datetime
    end_time: datetime

    @model_validator(mode="after")
    def validate_order(self) -> "ScrapingRunCreate":
        """A run cannot end before it starts."""
        self.start_time = as_utc(self.start_time)  # type: ignore[assignment]
        self.end_time = as_utc(self.end_time)  # type: ignore[assignment]
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class ScrapingRunResponse(BaseModel):
    """A scraping run log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    start_time: datetime
    end_time: datetime


# ============================================================================
# Health Models
# ============================================================================


class HealthResponse(BaseModel):
    """GET /health response."""

    status: Literal["healthy", "degraded"]
    database: Literal["connected", "unavailable"]
    migrations_pending: bool | None = None
    version: str
