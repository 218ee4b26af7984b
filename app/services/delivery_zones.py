"""
Delivery Zone Service - CRUD for delivery zones.
"""

from sqlalchemy import update
from structlog import get_logger

from app.db.models import DeliveryZone
from app.exceptions import ResourceKind, ResourceOperation
from app.models.api import DeliveryZoneCreate, DeliveryZoneUpdate
from app.services.resource import ResourceService

logger = get_logger(__name__)


class DeliveryZoneService(ResourceService[DeliveryZone]):
    """Service for delivery zones."""

    model = DeliveryZone
    resource = ResourceKind.DELIVERY_ZONE

    async def create_zone(self, data: DeliveryZoneCreate) -> DeliveryZone:
        """Insert a new zone."""
        return await self.create(DeliveryZone(name=data.name, description=data.description))

    async def update_zone(self, zone_id: int, data: DeliveryZoneUpdate) -> None:
        """
        Replace a zone's name and description.

        Raises NOT_FOUND if the zone does not exist. Applying the same update
        twice leaves the same state.
        """
        if not await self.exists(zone_id):
            raise self.not_found(zone_id)

        async with self._operation(ResourceOperation.UPDATE, zone_id):
            stmt = (
                update(DeliveryZone)
                .where(DeliveryZone.id == zone_id)
                .values(name=data.name, description=data.description)
                .execution_options(synchronize_session=False)
            )
            await self.db.execute(stmt)
            await self.db.commit()

        logger.info("delivery_zone_updated", zone_id=zone_id)
