"""
Price Service - Recorded prices and per-provider price history.
"""

from decimal import Decimal

from sqlalchemy import select
from structlog import get_logger

from app.db.models import Price
from app.exceptions import ResourceKind, ResourceOperation
from app.models.domain import PriceWindow
from app.services.providers import ProviderService
from app.services.resource import ResourceService

logger = get_logger(__name__)


class PriceService(ResourceService[Price]):
    """Service for prices."""

    model = Price
    resource = ResourceKind.PRICE

    async def create_for_provider(self, provider_id: int, price: Decimal) -> Price:
        """
        Record a price for a provider.

        Raises NOT_FOUND (for the provider) if the provider does not exist.
        """
        providers = ProviderService(self.db)
        if not await providers.exists(provider_id):
            raise providers.not_found(provider_id)

        return await self.create(Price(provider_id=provider_id, price=price))

    async def list_all(self) -> list[Price]:
        """Every recorded price, oldest first."""
        async with self._operation(ResourceOperation.FETCH):
            stmt = select(Price).order_by(Price.created_at, Price.id)
            result = await self.db.execute(stmt)
            return list(result.scalars().all())

    async def list_for_provider(
        self, provider_id: int, window: PriceWindow | None = None
    ) -> list[Price]:
        """
        A provider's price history, oldest first.

        start and end are exclusive bounds on created_at; limit and offset
        page through the result. An unknown provider has an empty history.
        """
        window = window or PriceWindow()

        async with self._operation(ResourceOperation.FETCH, provider_id):
            stmt = select(Price).where(Price.provider_id == provider_id)
            if window.start is not None:
                stmt = stmt.where(Price.created_at > window.start)
            if window.end is not None:
                stmt = stmt.where(Price.created_at < window.end)
            stmt = (
                stmt.order_by(Price.created_at, Price.id)
                .limit(window.limit)
                .offset(window.offset)
            )
            result = await self.db.execute(stmt)
            prices = list(result.scalars().all())

        logger.debug("provider_prices_listed", provider_id=provider_id, count=len(prices))
        return prices
