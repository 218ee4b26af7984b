"""
Price API routes - Prices across all providers.

Prices are created under /providers/{id}/prices.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_claims
from app.db.session import get_db
from app.models.api import ErrorResponse, PriceResponse, ResourceChangeResponse
from app.models.domain import TokenClaims
from app.services.prices import PriceService

router = APIRouter(prefix="/prices", tags=["prices"])


@router.get("", response_model=list[PriceResponse])
async def list_prices(db: AsyncSession = Depends(get_db)) -> list[PriceResponse]:
    """Every recorded price, oldest first."""
    prices = await PriceService(db).list_all()
    return [PriceResponse.model_validate(p) for p in prices]


@router.get("/{price_id}", response_model=PriceResponse, responses={404: {"model": ErrorResponse}})
async def get_price(price_id: int, db: AsyncSession = Depends(get_db)) -> PriceResponse:
    """Fetch one price."""
    price = await PriceService(db).get_or_raise(price_id)
    return PriceResponse.model_validate(price)


@router.delete(
    "/{price_id}", response_model=ResourceChangeResponse, responses={404: {"model": ErrorResponse}}
)
async def delete_price(
    price_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """Delete one price."""
    await PriceService(db).delete(price_id)
    return ResourceChangeResponse(id=price_id, message=f"Deleted price with id: {price_id}")
