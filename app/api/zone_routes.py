"""
Delivery Zone API routes - CRUD for delivery zones.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_claims
from app.db.session import get_db
from app.models.api import (
    DeliveryZoneCreate,
    DeliveryZoneResponse,
    DeliveryZoneUpdate,
    ErrorResponse,
    ResourceChangeResponse,
)
from app.models.domain import TokenClaims
from app.services.delivery_zones import DeliveryZoneService

router = APIRouter(prefix="/delivery-zones", tags=["delivery-zones"])

NOT_FOUND = {404: {"model": ErrorResponse}}


@router.get("", response_model=list[DeliveryZoneResponse])
async def list_zones(db: AsyncSession = Depends(get_db)) -> list[DeliveryZoneResponse]:
    """List every delivery zone."""
    zones = await DeliveryZoneService(db).list_all()
    return [DeliveryZoneResponse.model_validate(z) for z in zones]


@router.post("", response_model=ResourceChangeResponse, status_code=status.HTTP_201_CREATED)
async def create_zone(
    request: DeliveryZoneCreate,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """Create a delivery zone."""
    zone = await DeliveryZoneService(db).create_zone(request)
    return ResourceChangeResponse(id=zone.id, message=f"Created delivery zone with id: {zone.id}")


@router.get("/{zone_id}", response_model=DeliveryZoneResponse, responses=NOT_FOUND)
async def get_zone(zone_id: int, db: AsyncSession = Depends(get_db)) -> DeliveryZoneResponse:
    """Fetch one delivery zone."""
    zone = await DeliveryZoneService(db).get_or_raise(zone_id)
    return DeliveryZoneResponse.model_validate(zone)


@router.put("/{zone_id}", response_model=ResourceChangeResponse, responses=NOT_FOUND)
async def update_zone(
    zone_id: int,
    request: DeliveryZoneUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """Replace a delivery zone's fields."""
    await DeliveryZoneService(db).update_zone(zone_id, request)
    return ResourceChangeResponse(id=zone_id, message=f"Updated delivery zone with id: {zone_id}")


@router.delete("/{zone_id}", response_model=ResourceChangeResponse, responses=NOT_FOUND)
async def delete_zone(
    zone_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """Delete a delivery zone and detach it from every provider."""
    await DeliveryZoneService(db).delete(zone_id)
    return ResourceChangeResponse(id=zone_id, message=f"Deleted delivery zone with id: {zone_id}")
