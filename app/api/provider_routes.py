"""
Provider API routes - Providers, their zones and their prices.

Reads are public; writes require a bearer token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from app.api.dependencies import get_current_claims
from app.db.session import get_db
from app.models.api import (
    DeliveryZoneResponse,
    ErrorResponse,
    PriceCreate,
    PriceDetails,
    PriceQueryParams,
    ProviderCreate,
    ProviderResponse,
    ProviderUpdate,
    ProviderWithZonesResponse,
    ResourceChangeResponse,
    ZoneAssignmentRequest,
)
from app.models.domain import PriceWindow, TokenClaims
from app.services.prices import PriceService
from app.services.providers import ProviderService

logger = get_logger(__name__)
router = APIRouter(prefix="/providers", tags=["providers"])

NOT_FOUND = {404: {"model": ErrorResponse}}


@router.get("", response_model=list[ProviderResponse])
async def list_providers(db: AsyncSession = Depends(get_db)) -> list[ProviderResponse]:
    """List every provider."""
    providers = await ProviderService(db).list_all()
    return [ProviderResponse.model_validate(p) for p in providers]


@router.get("/zones", response_model=list[ProviderWithZonesResponse])
async def list_providers_with_zones(
    db: AsyncSession = Depends(get_db),
) -> list[ProviderWithZonesResponse]:
    """List every provider with the zones it delivers to."""
    providers = await ProviderService(db).list_with_zones()
    return [ProviderWithZonesResponse.model_validate(p, from_attributes=True) for p in providers]


@router.post("", response_model=ResourceChangeResponse, status_code=status.HTTP_201_CREATED)
async def create_provider(
    request: ProviderCreate,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """Create a provider."""
    provider = await ProviderService(db).create_provider(request)
    logger.info("provider_created", provider_id=provider.id, client_id=claims.subject)
    return ResourceChangeResponse(
        id=provider.id, message=f"Created provider with id: {provider.id}"
    )


@router.get("/{provider_id}", response_model=ProviderResponse, responses=NOT_FOUND)
async def get_provider(provider_id: int, db: AsyncSession = Depends(get_db)) -> ProviderResponse:
    """Fetch one provider; records the access time."""
    provider = await ProviderService(db).fetch_provider(provider_id)
    return ProviderResponse.model_validate(provider)


@router.put("/{provider_id}", response_model=ResourceChangeResponse, responses=NOT_FOUND)
async def update_provider(
    provider_id: int,
    request: ProviderUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """Replace a provider's fields."""
    await ProviderService(db).update_provider(provider_id, request)
    return ResourceChangeResponse(
        id=provider_id, message=f"Updated provider with id: {provider_id}"
    )


@router.delete("/{provider_id}", response_model=ResourceChangeResponse, responses=NOT_FOUND)
async def delete_provider(
    provider_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """Delete a provider with its prices and zone links."""
    await ProviderService(db).delete(provider_id)
    logger.info("provider_deleted", provider_id=provider_id, client_id=claims.subject)
    return ResourceChangeResponse(
        id=provider_id, message=f"Deleted provider with id: {provider_id}"
    )


# ============================================================================
# Zones
# ============================================================================


@router.get(
    "/{provider_id}/zones", response_model=list[DeliveryZoneResponse], responses=NOT_FOUND
)
async def list_provider_zones(
    provider_id: int, db: AsyncSession = Depends(get_db)
) -> list[DeliveryZoneResponse]:
    """Zones a provider delivers to."""
    zones = await ProviderService(db).list_zones(provider_id)
    return [DeliveryZoneResponse.model_validate(z) for z in zones]


@router.post(
    "/{provider_id}/zones",
    response_model=ResourceChangeResponse,
    status_code=status.HTTP_201_CREATED,
    responses=NOT_FOUND,
)
async def add_provider_zones(
    provider_id: int,
    request: ZoneAssignmentRequest,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """
    Attach zones to a provider.

    All or nothing: if any zone id is unknown, none are attached.
    """
    await ProviderService(db).add_zones(provider_id, request.zone_ids)
    return ResourceChangeResponse(
        id=provider_id, message=f"Added delivery zones to provider with id: {provider_id}"
    )


@router.delete(
    "/{provider_id}/zones/{zone_id}", response_model=ResourceChangeResponse, responses=NOT_FOUND
)
async def remove_provider_zone(
    provider_id: int,
    zone_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """Detach one zone from a provider."""
    await ProviderService(db).remove_zone(provider_id, zone_id)
    return ResourceChangeResponse(
        id=provider_id,
        message=f"Removed delivery zone {zone_id} from provider with id: {provider_id}",
    )


# ============================================================================
# Prices
# ============================================================================


@router.get("/{provider_id}/prices", response_model=list[PriceDetails])
async def list_provider_prices(
    provider_id: int,
    params: Annotated[PriceQueryParams, Query()],
    db: AsyncSession = Depends(get_db),
) -> list[PriceDetails]:
    """A provider's price history, oldest first; empty for an unknown provider."""
    window = PriceWindow(
        limit=params.limit, offset=params.offset, start=params.start, end=params.end
    )
    prices = await PriceService(db).list_for_provider(provider_id, window)
    return [PriceDetails.model_validate(p) for p in prices]


@router.post(
    "/{provider_id}/prices",
    response_model=ResourceChangeResponse,
    status_code=status.HTTP_201_CREATED,
    responses=NOT_FOUND,
)
async def create_provider_price(
    provider_id: int,
    request: PriceCreate,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """Record a price for a provider."""
    price = await PriceService(db).create_for_provider(provider_id, request.price)
    return ResourceChangeResponse(id=price.id, message=f"Created price with id: {price.id}")
