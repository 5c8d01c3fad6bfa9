# crm/domains/tag/crud.py

"""
CRUD logic of the 'tag' domain (tags and partner tag assignments).
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core.crud_base import CRUDBase
from . import models as tag_models
from . import schemas as tag_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. Tag CRUD
# =============================================================================
class CRUDTag(CRUDBase[tag_models.Tag, tag_schemas.TagCreate, tag_schemas.TagUpdate]):
    def __init__(self):
        super().__init__(model=tag_models.Tag)

    async def get_by_name(self, db: AsyncSession, *, tag_name: str) -> Optional[tag_models.Tag]:
        """Looks a tag up by its (unique) name."""
        return await self.get_by_attribute(db, attribute="tag_name", value=tag_name)

    async def search(self, db: AsyncSession, *, term: Optional[str]) -> List[tag_models.Tag]:
        """Tags whose name or description contains `term`; a blank term returns every tag."""
        query = select(self.model).order_by(self.model.tag_name)
        if term and term.strip():
            pattern = f"%{term.strip()}%"
            query = query.where(or_(self.model.tag_name.ilike(pattern), self.model.description.ilike(pattern)))
        result = await db.execute(query)
        return result.scalars().all()

    async def _ensure_unique_name(self, db: AsyncSession, tag_name: str, exclude_id: Optional[str] = None) -> None:
        existing = await self.get_by_name(db, tag_name=tag_name)
        if existing and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Tag with name '{tag_name}' already exists",
            )

    async def create(self, db: AsyncSession, *, obj_in: tag_schemas.TagCreate) -> tag_models.Tag:
        await self._ensure_unique_name(db, obj_in.tag_name)
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: tag_models.Tag, obj_in: tag_schemas.TagUpdate
    ) -> tag_models.Tag:
        if obj_in.tag_name is not None:
            await self._ensure_unique_name(db, obj_in.tag_name, exclude_id=db_obj.id)
        return await super().update(db, db_obj=db_obj, obj_in=obj_in)

    async def remove(self, db: AsyncSession, *, db_obj: tag_models.Tag) -> tag_models.Tag:
        """
        Deletes a tag. Tags still assigned to a partner are refused.
        """
        usage = await partner_tag.count_for_tag(db, tag_id=db_obj.id)
        if usage:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot delete tag '{db_obj.tag_name}': it is assigned to {usage} partner(s)",
            )
        await db.delete(db_obj)
        await self.commit_or_400(db, "Cannot delete tag due to existing related data.")
        logger.info("Tag '%s' deleted", db_obj.tag_name)
        return db_obj


# =============================================================================
# 2. PartnerTag CRUD
# =============================================================================
class CRUDPartnerTag(CRUDBase[tag_models.PartnerTag, SQLModel, SQLModel]):
    def __init__(self):
        super().__init__(model=tag_models.PartnerTag)

    async def get_link(self, db: AsyncSession, *, partner_id: str, tag_id: str) -> Optional[tag_models.PartnerTag]:
        query = select(self.model).where(self.model.partner_id == partner_id, self.model.tag_id == tag_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def get_tags_by_partner(self, db: AsyncSession, *, partner_id: str) -> List[tag_models.Tag]:
        """Tags assigned to a partner, ordered by name."""
        query = (
            select(tag_models.Tag)
            .join(tag_models.PartnerTag, tag_models.PartnerTag.tag_id == tag_models.Tag.id)
            .where(tag_models.PartnerTag.partner_id == partner_id)
            .order_by(tag_models.Tag.tag_name)
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def count_for_tag(self, db: AsyncSession, *, tag_id: str) -> int:
        query = select(func.count()).select_from(self.model).where(self.model.tag_id == tag_id)
        result = await db.execute(query)
        return result.scalar_one()

    async def add_tag(
        self, db: AsyncSession, *, partner_id: str, tag: tag_models.Tag, tagged_by: Optional[str] = None
    ) -> tag_models.PartnerTag:
        """
        Assigns a tag to a partner. Assigning the same tag twice is refused.
        """
        if await self.get_link(db, partner_id=partner_id, tag_id=tag.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Tag '{tag.tag_name}' is already assigned to this partner",
            )
        db_obj = tag_models.PartnerTag(partner_id=partner_id, tag_id=tag.id, tagged_by=tagged_by, tag=tag)
        db.add(db_obj)
        await self.commit_or_400(db, f"Tag '{tag.tag_name}' is already assigned to this partner")
        return await self.reload(db, db_obj=db_obj)

    async def remove_tag(self, db: AsyncSession, *, partner_id: str, tag_id: str) -> None:
        db_obj = await self.get_link(db, partner_id=partner_id, tag_id=tag_id)
        if db_obj is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Tag assignment not found for partner",
            )
        await db.delete(db_obj)
        await db.commit()


tag = CRUDTag()
partner_tag = CRUDPartnerTag()
