"""
Base repository class providing common database operations.

This class serves as a reusable foundation for repositories that interact with
the database using SQLAlchemy's async sessions.

The registry is append-only, so the shared surface is a validated `create()` plus
read operations. Model-specific repositories inherit from it and add their own queries.

Repositories never commit: they `flush()` so generated values (ids, defaults) are
available, and the caller (service or request dependency) decides when to commit.
"""
from tdd_notes.exceptions.base import (
    RepositoryError,
    DuplicateError,
    NotFoundError,
    InvalidFieldError
)
from tdd_notes.exceptions.mapper import db_error_handler
from tdd_notes.validators.model_validators import (
    find_unknown_model_kwargs,
    get_required_columns,
    find_unique_conflicts,
    sorted_fields,
)

import time
from typing import TypeVar, Generic, Type, Any
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging

from tdd_notes.database.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing validated creation and common reads.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (not an instance), used to build queries.
            db: The async database session all queries run on.
        """
        self.model = model
        self.db = db

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, **kwargs) -> ModelType:
        """
        Create an entity with validation + DB write. Logging:
        - DEBUG: start event with model name and provided keys (not values).
        - INFO: expected domain errors (invalid fields, missing required, duplicate).
        - INFO: success event with created id and duration_ms.

        Raises:
            InvalidFieldError: a kwarg is not a mapped attribute of the model.
            RepositoryError: a required column is missing or None.
            DuplicateError: a unique constraint would be violated.
        """
        model_name = self.model.__name__
        logger.debug(
            "repo.create.start",
            extra={"model": model_name, "operation": "create", "provided_keys": sorted(kwargs)},
        )

        # 1) unknown fields
        unknown = find_unknown_model_kwargs(self.model, kwargs)
        if unknown:
            logger.info(
                "repo.create.invalid_fields",
                extra={"model": model_name, "operation": "create", "invalid_fields": sorted(unknown)},
            )
            raise InvalidFieldError(f"Unknown field(s) for {model_name}: {', '.join(unknown)}", fields=unknown)

        # 2) required fields (NOT NULL without default), all missing ones at once
        missing = [c for c in get_required_columns(self.model) if kwargs.get(c) is None]
        if missing:
            logger.info(
                "repo.create.missing_required",
                extra={"model": model_name, "operation": "create", "missing_fields": sorted(missing)},
            )
            raise RepositoryError(f"Missing required field(s): {', '.join(missing)} for {model_name}", fields=missing)

        # 3) unique conflicts (best-effort pre-check)
        conflicts = await find_unique_conflicts(self.db, self.model, kwargs)
        if conflicts:
            fields = sorted_fields(conflicts)
            logger.info(
                "repo.create.duplicate_precheck",
                extra={"model": model_name, "operation": "create", "conflict_fields": fields},
            )
            raise DuplicateError(f"{model_name} already exists for field(s): {', '.join(fields)}", fields=fields)

        # 4) DB write; integrity errors that slip past the pre-check are mapped
        start = time.perf_counter()
        async with db_error_handler(self.db, model_name):
            entity = self.model(**kwargs)
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)

        logger.info(
            "repo.create.success",
            extra={
                "model": model_name,
                "operation": "create",
                "id": str(getattr(entity, "id", None)),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    # =================================================================================================================
    # Read (single entity)
    # =================================================================================================================

    async def get_by_id(self, entity_id: UUID) -> ModelType | None:
        """
        Return the entity with primary key `entity_id`, or None.
        """
        try:
            entity = await self.db.get(self.model, entity_id)
        except Exception as e:
            logger.error(f"Error retrieving {self.model.__name__} with id {entity_id}: {e}")
            raise RepositoryError(f"Failed to retrieve {self.model.__name__}") from e

        logger.debug(f"{self.model.__name__} {entity_id} {'found' if entity else 'not found'}")
        return entity

    async def get_by_id_or_raise(self, entity_id: UUID) -> ModelType:
        """
        Like `get_by_id` but raises NotFoundError when the entity does not exist.
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"{self.model.__name__} with id {entity_id} not found", fields=["id"])
        return entity

    async def find_by_field(self, field: str, value: Any) -> ModelType | None:
        """
        Find a single entity by an arbitrary field, e.g. find_by_field("slug", "money").

        Raises:
            InvalidFieldError: if the model has no such field.
            RepositoryError: if the query fails.
        """
        if not hasattr(self.model, field):
            raise InvalidFieldError(f"{self.model.__name__} has no field '{field}'", fields=[field])

        try:
            query = select(self.model).where(getattr(self.model, field) == value)
            result = await self.db.execute(query)
            entity = result.scalars().first()
        except Exception as e:
            logger.error(f"Error finding {self.model.__name__} by {field}={value}: {e}")
            raise RepositoryError(f"Failed to find {self.model.__name__}") from e

        logger.debug(f"Lookup {self.model.__name__} by {field}={value}: {'hit' if entity else 'miss'}")
        return entity

    # =================================================================================================================
    # Read (multiple entities)
    # =================================================================================================================

    async def get_all(
        self,
        offset: int = 0,                # Used for pagination: how many records to skip
        limit: int = 100,               # Max number of records to return
        order_by: str | None = None     # Optional: field to sort results by
    ) -> list[ModelType]:
        """
        Get all entities with optional ordering and pagination.

        Args:
            offset: Number of entities to skip.
            limit: Maximum number of entities to return.
            order_by: Field name to order results by (ascending). Defaults to
                'created_at' DESC when the model has it. Unknown fields are ignored
                with a warning.
        """
        query = select(self.model)

        if order_by:
            if hasattr(self.model, order_by):
                query = query.order_by(getattr(self.model, order_by))
            else:
                logger.warning(
                    f"Ignored invalid 'order_by' field: '{order_by}' does not exist on {self.model.__name__}")
        elif hasattr(self.model, "created_at"):
            query = query.order_by(self.model.created_at.desc())

        query = query.offset(offset).limit(limit)

        try:
            result = await self.db.execute(query)
            entities = list(result.scalars().all())
        except Exception as e:
            logger.error(f"Error retrieving all {self.model.__name__}: {e}")
            raise RepositoryError(f"Failed to retrieve {self.model.__name__} entities") from e

        logger.debug(f"Retrieved {len(entities)} {self.model.__name__} entities")
        return entities

    # =================================================================================================================
    # Utility
    # =================================================================================================================

    async def exists(self, entity_id: UUID) -> bool:
        query = select(func.count()).select_from(self.model).where(self.model.id == entity_id)
        result = await self.db.execute(query)
        return result.scalar_one() > 0

    async def count(self, **filters: Any) -> int:
        """
        Count entities, optionally filtered by equality on fields:
            await repo.count(example_id=example.id)

        Raises:
            InvalidFieldError: if a filter names a field the model does not have.
        """
        unknown = [f for f in filters if not hasattr(self.model, f)]
        if unknown:
            raise InvalidFieldError(f"Unknown filter field(s) for {self.model.__name__}: {', '.join(unknown)}",
                                    fields=unknown)

        query = select(func.count()).select_from(self.model)
        for field, value in filters.items():
            query = query.where(getattr(self.model, field) == value)

        result = await self.db.execute(query)
        return result.scalar_one()
