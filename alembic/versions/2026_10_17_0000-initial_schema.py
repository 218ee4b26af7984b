"""initial schema

Revision ID: 2026_10_17_0000
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "2026_10_17_0000"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create initial database schema."""

    # ========================================================================
    # Credentials
    # ========================================================================
    op.create_table(
        "users",
        sa.Column("client_id", sa.String(255), primary_key=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )

    # ========================================================================
    # Providers
    # ========================================================================
    op.create_table(
        "providers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("html_element", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "last_updated",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "last_accessed",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )

    # ========================================================================
    # Delivery zones and the provider association
    # ========================================================================
    op.create_table(
        "delivery_zones",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
    )

    op.create_table(
        "provider_delivery_zones",
        sa.Column(
            "provider_id",
            sa.Integer(),
            sa.ForeignKey("providers.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "zone_id",
            sa.Integer(),
            sa.ForeignKey("delivery_zones.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index(
        "idx_provider_delivery_zones_zone_id", "provider_delivery_zones", ["zone_id"]
    )

    # ========================================================================
    # Prices
    # ========================================================================
    op.create_table(
        "prices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "provider_id",
            sa.Integer(),
            sa.ForeignKey("providers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("price", sa.Numeric(10, 3), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )
    op.create_index("idx_prices_provider_created", "prices", ["provider_id", "created_at"])
    op.create_index("idx_prices_created_at", "prices", ["created_at"])

    # ========================================================================
    # Scraping runs
    # ========================================================================
    op.create_table(
        "scraping_runs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("end_time >= start_time", name="ck_scraping_run_time_order"),
    )
    op.create_index("idx_scraping_runs_end_time", "scraping_runs", ["end_time"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("idx_scraping_runs_end_time", table_name="scraping_runs")
    op.drop_table("scraping_runs")
    op.drop_index("idx_prices_created_at", table_name="prices")
    op.drop_index("idx_prices_provider_created", table_name="prices")
    op.drop_table("prices")
    op.drop_index("idx_provider_delivery_zones_zone_id", table_name="provider_delivery_zones")
    op.drop_table("provider_delivery_zones")
    op.drop_table("delivery_zones")
    op.drop_table("providers")
    op.drop_table("users")
