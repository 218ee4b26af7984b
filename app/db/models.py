"""
Database Models - SQLAlchemy ORM models with strict typing.

All columns use Mapped[] type annotations.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(UTC)


# Many-to-many link between providers and the zones they deliver to
provider_delivery_zones = Table(
    "provider_delivery_zones",
    Base.metadata,
    Column(
        "provider_id",
        Integer,
        ForeignKey("providers.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "zone_id",
        Integer,
        ForeignKey("delivery_zones.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Index("idx_provider_delivery_zones_zone_id", "zone_id"),
)


class User(Base):
    """
    ORM model for users table.

    One hashed credential per client identity. Rows are created at
    registration and never updated or deleted by the API.
    """

    __tablename__ = "users"

    client_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    def __repr__(self) -> str:
        """String representation for debugging (never includes the hash)."""
        return f"<User(client_id={self.client_id})>"


class Provider(Base):
    """
    ORM model for providers table.

    A fuel-price provider and the selector its page is scraped with.
    """

    __tablename__ = "providers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    html_element: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    last_accessed: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Provider(id={self.id}, name={self.name})>"


class DeliveryZone(Base):
    """ORM model for delivery_zones table."""

    __tablename__ = "delivery_zones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<DeliveryZone(id={self.id}, name={self.name})>"


class Price(Base):
    """
    ORM model for prices table.

    Every price belongs to exactly one provider.
    """

    __tablename__ = "prices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    provider_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("providers.id", ondelete="CASCADE"),
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (
        Index("idx_prices_provider_created", "provider_id", "created_at"),
        Index("idx_prices_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Price(id={self.id}, provider_id={self.provider_id}, price={self.price})>"


class ScrapingRun(Base):
    """
    ORM model for scraping_runs table.

    Append-only log written by the external scraper.
    """

    __tablename__ = "scraping_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("end_time >= start_time", name="ck_scraping_run_time_order"),
        Index("idx_scraping_runs_end_time", "end_time"),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<ScrapingRun(id={self.id}, end_time={self.end_time})>"
