# crm/core/crud_base.py

"""
Generic base class for the async CRUD (Create, Read, Update, Delete) operations.
"""

import logging
from typing import Generic, List, Optional, Type, TypeVar, Any, Sequence

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Base class with the CRUD operations shared by every table model.
    """
    # default ordering of get_multi, as attribute names of the model
    default_order_by: Sequence[str] = ()

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """Returns a single record by primary key."""
        return await db.get(self.model, id)

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: Optional[int] = 100, **kwargs: Any
    ) -> List[ModelType]:
        """
        Returns several records. Keyword arguments are applied as equality filters.
        `limit=None` returns every remaining record.
        """
        query = select(self.model)

        for field, value in kwargs.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)
            else:
                logger.warning("Model %s has no attribute '%s'", self.model.__name__, field)

        for field in self.default_order_by:
            query = query.order_by(getattr(self.model, field))

        query = query.offset(skip).limit(limit)
        result = await db.execute(query)
        return result.scalars().all()

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalars().first()

    async def reload(self, db: AsyncSession, *, db_obj: ModelType) -> ModelType:
        """
        Re-reads a record and its eagerly loaded relationships from the database.
        """
        statement = (
            select(self.model)
            .where(self.model.id == db_obj.id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        return result.scalars().one()

    async def commit_or_400(self, db: AsyncSession, detail: str) -> None:
        """
        Commits the session. Constraint violations are rolled back and
        reported as 400 Bad Request.
        """
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("IntegrityError on %s: %s", self.model.__name__, e, exc_info=True)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

    async def create(self, db: AsyncSession, *, obj_in: CreateSchemaType, **extra: Any) -> ModelType:
        """
        Creates a new record. `extra` sets fields that are not part of the input schema.
        """
        db_obj = self.model.model_validate(obj_in, update=extra)
        db.add(db_obj)
        await self.commit_or_400(db, f"Could not create {self.model.__name__}")
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: UpdateSchemaType
    ) -> ModelType:
        """
        Updates an existing record with the fields set on `obj_in`.
        """
        update_data = obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await self.commit_or_400(db, f"Could not update {self.model.__name__}")
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        """
        Deletes a record by primary key.
        """
        db_obj = await db.get(self.model, id)
        if db_obj:
            await db.delete(db_obj)
            await self.commit_or_400(db, f"Could not delete {self.model.__name__}")
        return db_obj
