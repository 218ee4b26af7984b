"""
Domain Models - Internal business logic models using dataclasses.

All data structures are strongly typed immutable dataclasses.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, verified bearer token payload."""

    subject: str
    expires_at: datetime
    issued_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate claims."""
        if not self.subject:
            raise ValueError("subject cannot be empty")
        if self.expires_at.tzinfo is None:
            raise ValueError("expires_at must be timezone-aware")


@dataclass(frozen=True)
class ZoneData:
    """Delivery zone attached to a provider."""

    id: int
    name: str
    description: str


@dataclass(frozen=True)
class ProviderWithZones:
    """Provider row plus every zone it delivers to (possibly none)."""

    id: int
    name: str
    url: str
    html_element: str
    created_at: datetime
    last_updated: datetime
    last_accessed: datetime
    zones: list[ZoneData] = field(default_factory=list)


@dataclass(frozen=True)
class PriceWindow:
    """Paging and time bounds for a provider's price history."""

    limit: int = 1000
    offset: int = 0
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        """Validate paging."""
        if self.limit <= 0:
            raise ValueError(f"limit must be positive: {self.limit}")
        if self.offset < 0:
            raise ValueError(f"offset cannot be negative: {self.offset}")
        if self.start is not None and self.end is not None and self.start >= self.end:
            raise ValueError("start must be before end")

