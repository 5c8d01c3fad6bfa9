# crm/domains/cnt/crud.py

"""
CRUD logic of the 'cnt' domain (contact details).
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core.crud_base import CRUDBase
from . import models as cnt_models
from . import schemas as cnt_schemas

logger = logging.getLogger(__name__)


class CRUDContactDetail(
    CRUDBase[
        cnt_models.ContactDetail,
        cnt_schemas.ContactDetailCreate,
        cnt_schemas.ContactDetailUpdate
    ]
):
    def __init__(self):
        super().__init__(model=cnt_models.ContactDetail)

    def _ordered(self, query):
        # primary first, then by contact type
        return query.order_by(self.model.is_primary.desc(), self.model.contact_type, self.model.contact_value)

    def _partner_query(self, partner_id: str):
        return self._ordered(select(self.model).where(self.model.partner_id == partner_id))

    async def get_for_partner(
        self, db: AsyncSession, *, partner_id: str, contact_id: str
    ) -> Optional[cnt_models.ContactDetail]:
        query = select(self.model).where(self.model.id == contact_id, self.model.partner_id == partner_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def get_by_partner(self, db: AsyncSession, *, partner_id: str) -> List[cnt_models.ContactDetail]:
        """Contacts of a partner, primary first, then by contact type."""
        result = await db.execute(self._partner_query(partner_id))
        return result.scalars().all()

    async def get_by_partner_and_type(
        self, db: AsyncSession, *, partner_id: str, contact_type: str
    ) -> List[cnt_models.ContactDetail]:
        query = self._partner_query(partner_id).where(self.model.contact_type == contact_type.upper())
        result = await db.execute(query)
        return result.scalars().all()

    async def get_primary(
        self, db: AsyncSession, *, partner_id: str, contact_type: str
    ) -> Optional[cnt_models.ContactDetail]:
        query = select(self.model).where(
            self.model.partner_id == partner_id,
            self.model.contact_type == contact_type.upper(),
            self.model.is_primary.is_(True),
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def search(self, db: AsyncSession, *, term: Optional[str]) -> List[cnt_models.ContactDetail]:
        """
        Contacts whose value or label contains `term` (case-insensitive).
        A blank term returns nothing.
        """
        if not term or not term.strip():
            return []
        pattern = f"%{term.strip()}%"
        query = self._ordered(
            select(self.model)
            .where(or_(self.model.contact_value.ilike(pattern), self.model.label.ilike(pattern)))
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def _clear_other_primaries(
        self, db: AsyncSession, *, partner_id: str, contact_type: str, exclude_id: Optional[str] = None
    ) -> None:
        """Only one primary contact may exist per (partner, contact type)."""
        statement = (
            update(self.model)
            .where(
                self.model.partner_id == partner_id,
                self.model.contact_type == contact_type,
                self.model.is_primary.is_(True),
            )
            .values(is_primary=False)
        )
        if exclude_id is not None:
            statement = statement.where(self.model.id != exclude_id)
        await db.execute(statement)

    async def create_for_partner(
        self, db: AsyncSession, *, partner_id: str, obj_in: cnt_schemas.ContactDetailCreate
    ) -> cnt_models.ContactDetail:
        if obj_in.is_primary and obj_in.contact_type is not None:
            await self._clear_other_primaries(db, partner_id=partner_id, contact_type=obj_in.contact_type)
        return await super().create(db, obj_in=obj_in, partner_id=partner_id)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: cnt_models.ContactDetail,
        obj_in: cnt_schemas.ContactDetailUpdate
    ) -> cnt_models.ContactDetail:
        update_data = obj_in.model_dump(exclude_unset=True)
        contact_type = update_data.get("contact_type", db_obj.contact_type)
        contact_value = update_data.get("contact_value", db_obj.contact_value)
        try:
            cnt_schemas.check_contact_value(contact_type, contact_value)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        is_primary = update_data.get("is_primary", db_obj.is_primary)
        if is_primary and contact_type is not None:
            await self._clear_other_primaries(
                db, partner_id=db_obj.partner_id, contact_type=contact_type, exclude_id=db_obj.id
            )
        return await super().update(db, db_obj=db_obj, obj_in=obj_in)


contact_detail = CRUDContactDetail()
