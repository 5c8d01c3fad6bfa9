# crm/domains/rel/crud.py

"""
CRUD logic of the 'rel' domain (relationship types, partner relationships,
SME relationships).
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core.crud_base import CRUDBase
from crm.domains.prt import models as prt_models
from . import models as rel_models
from . import schemas as rel_schemas

logger = logging.getLogger(__name__)


def check_dates_or_400(start, end, label: str) -> None:
    """Date ranges with the end before the start are a 400 Bad Request."""
    try:
        rel_schemas.check_date_order(start, end, label)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# =============================================================================
# 1. RelationshipType CRUD
# =============================================================================
class CRUDRelationshipType(
    CRUDBase[
        rel_models.RelationshipType,
        rel_schemas.RelationshipTypeCreate,
        rel_schemas.RelationshipTypeUpdate
    ]
):
    def __init__(self):
        super().__init__(model=rel_models.RelationshipType)

    async def get_by_name(self, db: AsyncSession, *, type_name: str) -> Optional[rel_models.RelationshipType]:
        return await self.get_by_attribute(db, attribute="type_name", value=type_name)

    async def search(
        self, db: AsyncSession, *, term: Optional[str] = None, active_only: bool = False
    ) -> List[rel_models.RelationshipType]:
        """
        Relationship types ordered by name, optionally filtered by a search
        term (name or description) and by the active flag.
        """
        query = select(self.model).order_by(self.model.type_name)
        if active_only:
            query = query.where(self.model.is_active.is_(True))
        if term and term.strip():
            pattern = f"%{term.strip()}%"
            query = query.where(or_(self.model.type_name.ilike(pattern), self.model.description.ilike(pattern)))
        result = await db.execute(query)
        return result.scalars().all()

    async def _ensure_unique_name(self, db: AsyncSession, type_name: str, exclude_id: Optional[str] = None) -> None:
        existing = await self.get_by_name(db, type_name=type_name)
        if existing and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Relationship type with name '{type_name}' already exists",
            )

    async def create(
        self, db: AsyncSession, *, obj_in: rel_schemas.RelationshipTypeCreate
    ) -> rel_models.RelationshipType:
        await self._ensure_unique_name(db, obj_in.type_name)
        return await super().create(db, obj_in=obj_in)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: rel_models.RelationshipType,
        obj_in: rel_schemas.RelationshipTypeUpdate
    ) -> rel_models.RelationshipType:
        if obj_in.type_name is not None:
            await self._ensure_unique_name(db, obj_in.type_name, exclude_id=db_obj.id)
        return await super().update(db, db_obj=db_obj, obj_in=obj_in)

    async def remove(self, db: AsyncSession, *, db_obj: rel_models.RelationshipType) -> rel_models.RelationshipType:
        """
        Deletes a relationship type. Types still used by a relationship are refused.
        """
        usage = await partner_relationship.count_for_type(db, relationship_type_id=db_obj.id)
        if usage:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot delete relationship type '{db_obj.type_name}': it is used by {usage} relationship(s)",
            )
        await db.delete(db_obj)
        await self.commit_or_400(db, "Cannot delete relationship type due to existing related data.")
        return db_obj


# =============================================================================
# 2. PartnerRelationship CRUD
# =============================================================================
class CRUDPartnerRelationship(
    CRUDBase[
        rel_models.PartnerRelationship,
        rel_schemas.PartnerRelationshipCreate,
        rel_schemas.PartnerRelationshipUpdate
    ]
):
    def __init__(self):
        super().__init__(model=rel_models.PartnerRelationship)

    async def get_by_partner(self, db: AsyncSession, *, partner_id: str) -> List[rel_models.PartnerRelationship]:
        """
        Relationships on either side of a partner, latest effective date first.
        """
        query = (
            select(self.model)
            .where(or_(self.model.from_partner_id == partner_id, self.model.to_partner_id == partner_id))
            .order_by(self.model.effective_from.desc().nulls_last(), self.model.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_for_partner(
        self, db: AsyncSession, *, partner_id: str, relationship_id: str
    ) -> Optional[rel_models.PartnerRelationship]:
        query = select(self.model).where(
            self.model.id == relationship_id,
            or_(self.model.from_partner_id == partner_id, self.model.to_partner_id == partner_id),
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def count_for_type(self, db: AsyncSession, *, relationship_type_id: str) -> int:
        query = (
            select(func.count())
            .select_from(self.model)
            .where(self.model.relationship_type_id == relationship_type_id)
        )
        result = await db.execute(query)
        return result.scalar_one()

    async def _get_type(self, db: AsyncSession, relationship_type_id: Optional[str]) -> Optional[rel_models.RelationshipType]:
        if relationship_type_id is None:
            return None
        rel_type = await relationship_type.get(db, id=relationship_type_id)
        if rel_type is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Relationship type not found")
        return rel_type

    async def create_between(
        self,
        db: AsyncSession,
        *,
        from_partner_id: str,
        to_partner_id: str,
        obj_in: rel_schemas.PartnerRelationshipCreate,
    ) -> rel_models.PartnerRelationship:
        """
        Creates a typed relationship from one partner to another.
        """
        from_partner = await db.get(prt_models.Partner, from_partner_id)
        if from_partner is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="From partner not found")
        to_partner = await db.get(prt_models.Partner, to_partner_id)
        if to_partner is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="To partner not found")
        if from_partner.id == to_partner.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A partner cannot have a relationship with itself",
            )
        rel_type = await self._get_type(db, obj_in.relationship_type_id)
        check_dates_or_400(obj_in.effective_from, obj_in.effective_to, "Relationship")

        db_obj = rel_models.PartnerRelationship.model_validate(
            obj_in, update={"from_partner_id": from_partner.id, "to_partner_id": to_partner.id}
        )
        db_obj.from_partner = from_partner
        db_obj.to_partner = to_partner
        db_obj.relationship_type = rel_type
        db.add(db_obj)
        await self.commit_or_400(db, "Could not create partner relationship")
        db_obj = await self.reload(db, db_obj=db_obj)
        logger.info(
            "Relationship %s created: %s -> %s", db_obj.id, from_partner.partner_number, to_partner.partner_number
        )
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: rel_models.PartnerRelationship,
        obj_in: rel_schemas.PartnerRelationshipUpdate
    ) -> rel_models.PartnerRelationship:
        update_data = obj_in.model_dump(exclude_unset=True)
        if "relationship_type_id" in update_data:
            db_obj.relationship_type = await self._get_type(db, update_data["relationship_type_id"])

        effective_from = update_data.get("effective_from", db_obj.effective_from)
        effective_to = update_data.get("effective_to", db_obj.effective_to)
        check_dates_or_400(effective_from, effective_to, "Relationship")
        db_obj = await super().update(db, db_obj=db_obj, obj_in=obj_in)
        return await self.reload(db, db_obj=db_obj)


# =============================================================================
# 3. SMERelationship CRUD
# =============================================================================
class CRUDSMERelationship(
    CRUDBase[
        rel_models.SMERelationship,
        rel_schemas.SMERelationshipCreate,
        rel_schemas.SMERelationshipUpdate
    ]
):
    def __init__(self):
        super().__init__(model=rel_models.SMERelationship)

    async def get_by_partner(self, db: AsyncSession, *, partner_id: str) -> List[rel_models.SMERelationship]:
        query = (
            select(self.model)
            .where(self.model.partner_id == partner_id)
            .order_by(self.model.relationship_start.desc().nulls_last())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_for_partner(
        self, db: AsyncSession, *, partner_id: str, sme_id: str
    ) -> Optional[rel_models.SMERelationship]:
        query = select(self.model).where(self.model.id == sme_id, self.model.partner_id == partner_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def create_for_partner(
        self, db: AsyncSession, *, partner_id: str, obj_in: rel_schemas.SMERelationshipCreate
    ) -> rel_models.SMERelationship:
        check_dates_or_400(obj_in.relationship_start, obj_in.relationship_end, "SME relationship")
        return await super().create(db, obj_in=obj_in, partner_id=partner_id)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: rel_models.SMERelationship,
        obj_in: rel_schemas.SMERelationshipUpdate
    ) -> rel_models.SMERelationship:
        update_data = obj_in.model_dump(exclude_unset=True)
        start = update_data.get("relationship_start", db_obj.relationship_start)
        end = update_data.get("relationship_end", db_obj.relationship_end)
        check_dates_or_400(start, end, "SME relationship")
        return await super().update(db, db_obj=db_obj, obj_in=obj_in)


relationship_type = CRUDRelationshipType()
partner_relationship = CRUDPartnerRelationship()
sme_relationship = CRUDSMERelationship()
