"""
Resource Service Base - shared lookup and error mapping for resource services.

Every persistence failure leaves a service as a ResourceError tagged with the
resource kind and the operation that failed.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import ClassVar, Generic, NoReturn, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from app.db.models import Base
from app.exceptions import ResourceError, ResourceKind, ResourceOperation
from app.observability.metrics import metrics

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class ResourceService(Generic[ModelT]):
    """Base class for services that own one table."""

    model: ClassVar[type[Base]]
    resource: ClassVar[ResourceKind]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _handle_db_error(
        self,
        e: Exception,
        operation: ResourceOperation,
        entity_id: int | None = None,
    ) -> NoReturn:
        """
        Wrap a persistence failure with resource context.

        ResourceErrors pass through unchanged so a NOT_FOUND raised inside an
        operation keeps its status.
        """
        if isinstance(e, ResourceError):
            raise e

        logger.error(
            "resource_operation_failed",
            resource=self.resource.value,
            operation=operation.value,
            entity_id=entity_id,
            error=str(e),
        )
        metrics.record_resource_operation(self.resource.value, operation.value, "error")
        metrics.record_error(type(e).__name__, f"{self.resource.name.lower()}_{operation.value}")
        raise ResourceError(self.resource, operation, e) from e

    @asynccontextmanager
    async def _operation(
        self,
        operation: ResourceOperation,
        entity_id: int | None = None,
    ) -> AsyncIterator[AsyncSession]:
        """
        Run statements for one operation, mapping store failures.

        Nothing is committed here; write operations commit inside the block.
        Any failure rolls the session back.
        """
        try:
            yield self.db
        except (SQLAlchemyError, ResourceError) as e:
            await self.db.rollback()
            self._handle_db_error(e, operation, entity_id)
        else:
            metrics.record_resource_operation(self.resource.value, operation.value, "success")

    def not_found(self, entity_id: int | None = None) -> ResourceError:
        """Build this resource's NOT_FOUND error."""
        logger.info("resource_not_found", resource=self.resource.value, entity_id=entity_id)
        metrics.record_resource_operation(
            self.resource.value, ResourceOperation.NOT_FOUND.value, "not_found"
        )
        return ResourceError.not_found(self.resource)

    async def get(self, entity_id: int) -> ModelT | None:
        """Fetch a row by primary key, or None."""
        async with self._operation(ResourceOperation.FETCH, entity_id):
            stmt = select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()  # type: ignore[no-any-return]

    async def get_or_raise(self, entity_id: int) -> ModelT:
        """Fetch a row by primary key, raising NOT_FOUND if absent."""
        entity = await self.get(entity_id)
        if entity is None:
            raise self.not_found(entity_id)
        return entity

    async def exists(self, entity_id: int) -> bool:
        """Whether a row with this primary key exists."""
        async with self._operation(ResourceOperation.FETCH, entity_id):
            stmt = select(self.model.id).where(self.model.id == entity_id)  # type: ignore[attr-defined]
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def list_all(self) -> list[ModelT]:
        """Fetch every row ordered by id."""
        async with self._operation(ResourceOperation.FETCH):
            stmt = select(self.model).order_by(self.model.id)  # type: ignore[attr-defined]
            result = await self.db.execute(stmt)
            return list(result.scalars().all())

    async def create(self, entity: ModelT) -> ModelT:
        """Insert a row and return it with its generated id."""
        async with self._operation(ResourceOperation.INSERT):
            self.db.add(entity)
            await self.db.commit()
            await self.db.refresh(entity)

        logger.info(
            "resource_created",
            resource=self.resource.value,
            entity_id=entity.id,  # type: ignore[attr-defined]
        )
        return entity

    async def delete(self, entity_id: int) -> None:
        """
        Delete a row by primary key.

        Deleting an id that does not exist raises NOT_FOUND; delete is not
        idempotent.
        """
        if not await self.exists(entity_id):
            raise self.not_found(entity_id)

        async with self._operation(ResourceOperation.DELETE, entity_id):
            stmt = delete(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
            await self.db.execute(stmt)
            await self.db.commit()

        logger.info("resource_deleted", resource=self.resource.value, entity_id=entity_id)
