"""
Scraping Run API routes - Log of scraper executions.

The external scraper posts one entry per run and reads /last to decide when
to run next.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_claims
from app.db.session import get_db
from app.models.api import (
    ErrorResponse,
    ResourceChangeResponse,
    ScrapingRunCreate,
    ScrapingRunResponse,
)
from app.models.domain import TokenClaims
from app.services.scraping_runs import ScrapingRunService

router = APIRouter(prefix="/scraping-runs", tags=["scraping-runs"])


@router.get("", response_model=list[ScrapingRunResponse])
async def list_runs(db: AsyncSession = Depends(get_db)) -> list[ScrapingRunResponse]:
    """Every logged run, by id."""
    runs = await ScrapingRunService(db).list_all()
    return [ScrapingRunResponse.model_validate(r) for r in runs]


@router.post("", response_model=ResourceChangeResponse, status_code=status.HTTP_201_CREATED)
async def create_run(
    request: ScrapingRunCreate,
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> ResourceChangeResponse:
    """Log a scraping run."""
    run = await ScrapingRunService(db).create_run(request)
    return ResourceChangeResponse(id=run.id, message=f"Created scraping run with id: {run.id}")


@router.get(
    "/last", response_model=ScrapingRunResponse, responses={500: {"model": ErrorResponse}}
)
async def get_last_run(db: AsyncSession = Depends(get_db)) -> ScrapingRunResponse:
    """
    The most recently finished run.

    Errors:
        500: no run has been logged yet
    """
    run = await ScrapingRunService(db).get_last()
    return ScrapingRunResponse.model_validate(run)
