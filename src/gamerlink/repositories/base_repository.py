"""
Base repository class providing common database operations.

Model-specific repositories inherit from `BaseRepository[Model]` for the generic
create / read / delete / count paths and add their own queries on top.

Repositories never commit. They `flush()` so ids and server defaults are
available, and leave the transaction boundary to the caller (service or
request dependency).
"""
from gamerlink.exceptions.base import (
    RepositoryError,
    DuplicateError,
    NotFoundError,
    InvalidFieldError
)
from gamerlink.exceptions.mapper import db_error_handler
from gamerlink.validators.model_validators import (
    find_unknown_model_kwargs,
    get_required_columns,
    find_unique_conflicts,
)

import time
from typing import TypeVar, Generic, Type, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
import logging

from gamerlink.database.base import Base

ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (not an instance), e.g. `Message`
            db: The async database session
        """
        self.model = model
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, **kwargs) -> ModelType:
        """
        Validate and insert one entity, returning it with server defaults populated.

        Logging:
        - DEBUG: start event with the provided keys (never values).
        - INFO: expected client errors (unknown fields, missing required, duplicate).
        - INFO: success event with id and duration_ms.

        Raises:
            InvalidFieldError: unknown keyword arguments
            RepositoryError: required columns missing
            DuplicateError: unique pre-check or constraint failure
        """
        logger.debug(
            "repo.create.start",
            extra={
                "model": self.model_name,
                "operation": "create",
                "provided_keys": sorted(kwargs.keys()),
            },
        )

        unknown = find_unknown_model_kwargs(self.model, kwargs)
        if unknown:
            logger.info(
                "repo.create.invalid_fields",
                extra={"model": self.model_name, "invalid_fields": sorted(unknown)},
            )
            raise InvalidFieldError(f"Unknown field(s) for {self.model_name}: {', '.join(unknown)}", fields=unknown)

        # Missing if not provided or explicitly None (the columns are NOT NULL)
        missing = [c for c in get_required_columns(self.model) if kwargs.get(c) is None]
        if missing:
            logger.info(
                "repo.create.missing_required",
                extra={"model": self.model_name, "missing_fields": sorted(missing)},
            )
            raise RepositoryError(f"Missing required field(s): {', '.join(missing)} for {self.model_name}",
                                  fields=missing)

        conflicts = await find_unique_conflicts(self.db, self.model, kwargs)
        if conflicts:
            logger.info(
                "repo.create.duplicate_precheck",
                extra={"model": self.model_name, "conflict_fields": sorted(conflicts)},
            )
            raise DuplicateError(f"{self.model_name} already exists for field(s): {', '.join(sorted(conflicts))}",
                                 fields=sorted(conflicts))

        start = time.perf_counter()

        async with db_error_handler(self.db, self.model_name):
            entity = self.model(**kwargs)
            self.db.add(entity)
            await self.db.flush()
            # pull server-side defaults (created_at) back onto the instance
            await self.db.refresh(entity)

        logger.info(
            "repo.create.success",
            extra={
                "model": self.model_name,
                "id": getattr(entity, "id", None),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(
                select(self.model).where(self.model.id == entity_id)
            )
            entity = result.scalar_one_or_none()

        logger.debug("repo.get_by_id", extra={"model": self.model_name, "id": entity_id, "found": entity is not None})
        return entity

    async def get_by_id_or_raise(self, entity_id: Any) -> ModelType:
        """
        Raises:
            NotFoundError: If the entity does not exist.
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"{self.model_name} with ID {entity_id} not found", fields=["id"])
        return entity

    async def exists(self, entity_id: Any) -> bool:
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(select(self.model.id).where(self.model.id == entity_id))
            return result.scalar() is not None

    async def count(self, **filters: Any) -> int:
        """Count entities matching simple equality filters (unknown fields are ignored)."""
        query = select(func.count(self.model.id))
        for field, value in filters.items():
            if hasattr(self.model, field) and value is not None:
                query = query.where(getattr(self.model, field) == value)

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(query)
            return result.scalar() or 0

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete(self, entity_id: Any) -> bool:
        """
        Hard-delete an entity by id.

        Returns:
            True if a row was removed, False if no row had that id.
        """
        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(delete(self.model).where(self.model.id == entity_id))

        if result.rowcount > 0:
            logger.info("repo.delete.success", extra={"model": self.model_name, "id": entity_id})
            return True

        logger.info("repo.delete.not_found", extra={"model": self.model_name, "id": entity_id})
        return False
