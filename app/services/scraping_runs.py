"""
Scraping Run Service - Append-only log of scraper executions.
"""

from sqlalchemy import select
from structlog import get_logger

from app.db.models import ScrapingRun
from app.exceptions import EmptyResultError, ResourceError, ResourceKind, ResourceOperation
from app.models.api import ScrapingRunCreate
from app.services.resource import ResourceService

logger = get_logger(__name__)


class ScrapingRunService(ResourceService[ScrapingRun]):
    """Service for scraping runs."""

    model = ScrapingRun
    resource = ResourceKind.SCRAPING_RUN

    async def create_run(self, data: ScrapingRunCreate) -> ScrapingRun:
        """Log a finished run."""
        return await self.create(ScrapingRun(start_time=data.start_time, end_time=data.end_time))

    async def get_last(self) -> ScrapingRun:
        """
        The run that finished most recently.

        An empty log is a FETCH error, not a NOT_FOUND.
        """
        async with self._operation(ResourceOperation.FETCH):
            stmt = (
                select(ScrapingRun)
                .order_by(ScrapingRun.end_time.desc(), ScrapingRun.id.desc())
                .limit(1)
            )
            result = await self.db.execute(stmt)
            run = result.scalar_one_or_none()

        if run is None:
            logger.warning("scraping_run_log_empty")
            raise ResourceError.fetch_error(ResourceKind.SCRAPING_RUN, EmptyResultError())
        return run
