"""
Provider Service - Providers, their delivery zones, and read side effects.

Consistency rules:
- Fetching one provider records the access time; a failed write fails the read.
- Attaching zones is all-or-nothing: the provider and every zone are checked
  inside one transaction, and any missing id rolls back the whole batch.
- Deleting or updating a missing provider is a NOT_FOUND, not a no-op.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm.attributes import set_committed_value
from structlog import get_logger

from app.db.models import DeliveryZone, Provider, provider_delivery_zones, utc_now
from app.exceptions import ResourceError, ResourceKind, ResourceOperation
from app.models.api import ProviderCreate, ProviderUpdate
from app.models.domain import ProviderWithZones, ZoneData
from app.observability.tracing import trace_operation
from app.services.delivery_zones import DeliveryZoneService
from app.services.resource import ResourceService

logger = get_logger(__name__)


def zone_not_found_for_provider(error: ResourceError) -> ResourceError:
    """
    Re-tag a missing-zone error raised while changing a provider's zones.

    The zone error is kept as the cause, so the message names the zone.
    """
    return ResourceError.not_found(ResourceKind.PROVIDER, cause=error)


def group_provider_zones(
    rows: Iterable[tuple[Provider, DeliveryZone | None]],
) -> list[ProviderWithZones]:
    """
    Fold (provider, zone) join rows into one entry per provider.

    Providers keep the order they first appear in; a provider whose only row
    has no zone gets an empty zone list.
    """
    grouped: dict[int, tuple[Provider, list[ZoneData]]] = {}

    for provider, zone in rows:
        if provider.id not in grouped:
            grouped[provider.id] = (provider, [])
        if zone is not None:
            grouped[provider.id][1].append(
                ZoneData(id=zone.id, name=zone.name, description=zone.description)
            )

    return [
        ProviderWithZones(
            id=provider.id,
            name=provider.name,
            url=provider.url,
            html_element=provider.html_element,
            created_at=provider.created_at,
            last_updated=provider.last_updated,
            last_accessed=provider.last_accessed,
            zones=zones,
        )
        for provider, zones in grouped.values()
    ]


class ProviderService(ResourceService[Provider]):
    """Service for providers and their zone associations."""

    model = Provider
    resource = ResourceKind.PROVIDER

    async def create_provider(self, data: ProviderCreate) -> Provider:
        """Insert a new provider."""
        return await self.create(
            Provider(name=data.name, url=data.url, html_element=data.html_element)
        )

    async def fetch_provider(self, provider_id: int) -> Provider:
        """
        Fetch one provider and record the access.

        The last_accessed write is awaited; if it fails the fetch fails with
        an UPDATE error.
        """
        provider = await self.get_or_raise(provider_id)
        accessed_at = await self.update_last_accessed(provider_id)
        set_committed_value(provider, "last_accessed", accessed_at)

        logger.info("provider_fetched", provider_id=provider_id)
        return provider

    async def update_last_accessed(self, provider_id: int) -> datetime:
        """Set last_accessed to now and return the stored timestamp."""
        accessed_at = utc_now()

        async with self._operation(ResourceOperation.UPDATE, provider_id):
            stmt = (
                update(Provider)
                .where(Provider.id == provider_id)
                .values(last_accessed=accessed_at)
                .execution_options(synchronize_session=False)
            )
            await self.db.execute(stmt)
            await self.db.commit()

        return accessed_at

    async def update_provider(self, provider_id: int, data: ProviderUpdate) -> None:
        """
        Replace a provider's name, url and selector.

        Raises NOT_FOUND if the provider does not exist. Repeating the same
        update yields the same stored fields.
        """
        if not await self.exists(provider_id):
            raise self.not_found(provider_id)

        async with self._operation(ResourceOperation.UPDATE, provider_id):
            stmt = (
                update(Provider)
                .where(Provider.id == provider_id)
                .values(
                    name=data.name,
                    url=data.url,
                    html_element=data.html_element,
                    last_updated=utc_now(),
                )
                .execution_options(synchronize_session=False)
            )
            await self.db.execute(stmt)
            await self.db.commit()

        logger.info("provider_updated", provider_id=provider_id)

    # ========================================================================
    # Zone associations
    # ========================================================================

    async def add_zones(self, provider_id: int, zone_ids: Sequence[int]) -> None:
        """
        Attach zones to a provider atomically.

        Each zone is checked before its insert. Any missing provider or zone
        raises NOT_FOUND and rolls back every insert made by this call.
        Zones already attached are left as they are.
        """
        zones = DeliveryZoneService(self.db)
        unique_zone_ids = list(dict.fromkeys(zone_ids))

        with trace_operation(
            "provider_add_zones", provider_id=provider_id, zone_count=len(unique_zone_ids)
        ):
            async with self._operation(ResourceOperation.INSERT, provider_id):
                if not await self.exists(provider_id):
                    raise self.not_found(provider_id)

                for zone_id in unique_zone_ids:
                    if not await zones.exists(zone_id):
                        raise zone_not_found_for_provider(zones.not_found(zone_id))

                    stmt = (
                        insert(provider_delivery_zones)
                        .values(provider_id=provider_id, zone_id=zone_id)
                        .on_conflict_do_nothing()
                    )
                    await self.db.execute(stmt)

                await self.db.commit()

        logger.info("provider_zones_added", provider_id=provider_id, zone_ids=unique_zone_ids)

    async def remove_zone(self, provider_id: int, zone_id: int) -> None:
        """Detach one zone from a provider; NOT_FOUND if it was not attached."""
        if not await self.exists(provider_id):
            raise self.not_found(provider_id)

        async with self._operation(ResourceOperation.DELETE, provider_id):
            stmt = delete(provider_delivery_zones).where(
                provider_delivery_zones.c.provider_id == provider_id,
                provider_delivery_zones.c.zone_id == zone_id,
            )
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                raise zone_not_found_for_provider(
                    DeliveryZoneService(self.db).not_found(zone_id)
                )
            await self.db.commit()

        logger.info("provider_zone_removed", provider_id=provider_id, zone_id=zone_id)

    async def list_zones(self, provider_id: int) -> list[DeliveryZone]:
        """Zones attached to one provider, ordered by id."""
        if not await self.exists(provider_id):
            raise self.not_found(provider_id)

        async with self._operation(ResourceOperation.FETCH, provider_id):
            stmt = (
                select(DeliveryZone)
                .join(
                    provider_delivery_zones,
                    provider_delivery_zones.c.zone_id == DeliveryZone.id,
                )
                .where(provider_delivery_zones.c.provider_id == provider_id)
                .order_by(DeliveryZone.id)
            )
            result = await self.db.execute(stmt)
            return list(result.scalars().all())

    async def list_with_zones(self) -> list[ProviderWithZones]:
        """Every provider with its zones, via a left outer join."""
        async with self._operation(ResourceOperation.FETCH):
            stmt = (
                select(Provider, DeliveryZone)
                .outerjoin(
                    provider_delivery_zones,
                    provider_delivery_zones.c.provider_id == Provider.id,
                )
                .outerjoin(DeliveryZone, DeliveryZone.id == provider_delivery_zones.c.zone_id)
                .order_by(Provider.id, DeliveryZone.id)
            )
            result = await self.db.execute(stmt)
            rows = result.all()

        return group_provider_zones(rows)  # type: ignore[arg-type]
