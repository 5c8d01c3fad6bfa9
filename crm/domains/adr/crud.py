# crm/domains/adr/crud.py

"""
CRUD logic of the 'adr' domain (addresses and partner address links).
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core.crud_base import CRUDBase
from . import models as adr_models
from . import schemas as adr_schemas

logger = logging.getLogger(__name__)


def check_validity_or_400(db_obj, obj_in) -> None:
    """The stored validity period merged with the update must not end before it starts."""
    update_data = obj_in.model_dump(exclude_unset=True)
    valid_from = update_data.get("valid_from", db_obj.valid_from)
    valid_to = update_data.get("valid_to", db_obj.valid_to)
    try:
        adr_schemas.check_validity_range(valid_from, valid_to)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# =============================================================================
# 1. Address CRUD
# =============================================================================
class CRUDAddress(CRUDBase[adr_models.Address, adr_schemas.AddressCreate, adr_schemas.AddressUpdate]):
    def __init__(self):
        super().__init__(model=adr_models.Address)

    async def search(self, db: AsyncSession, *, term: Optional[str]) -> List[adr_models.Address]:
        """
        Addresses with `term` in any text column, ordered by city and street.
        A blank term returns every address.
        """
        query = select(self.model).order_by(self.model.city, self.model.street_line1)
        if term and term.strip():
            pattern = f"%{term.strip()}%"
            query = query.where(
                or_(
                    self.model.street_line1.ilike(pattern),
                    self.model.street_line2.ilike(pattern),
                    self.model.city.ilike(pattern),
                    self.model.state_province.ilike(pattern),
                    self.model.postal_code.ilike(pattern),
                    self.model.country_code.ilike(pattern),
                )
            )
        result = await db.execute(query)
        return result.scalars().all()

    async def update(
        self, db: AsyncSession, *, db_obj: adr_models.Address, obj_in: adr_schemas.AddressUpdate
    ) -> adr_models.Address:
        check_validity_or_400(db_obj, obj_in)
        return await super().update(db, db_obj=db_obj, obj_in=obj_in)

    async def remove(self, db: AsyncSession, *, db_obj: adr_models.Address) -> adr_models.Address:
        """
        Deletes an address. Addresses still linked to a partner are refused.
        """
        usage = await address_detail.count_for_address(db, address_id=db_obj.id)
        if usage:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot delete address: it is currently in use by {usage} partner(s)",
            )
        await db.delete(db_obj)
        await self.commit_or_400(db, "Cannot delete address due to existing related data.")
        return db_obj


# =============================================================================
# 2. AddressDetail CRUD
# =============================================================================
class CRUDAddressDetail(
    CRUDBase[
        adr_models.AddressDetail,
        adr_schemas.AddressDetailCreate,
        adr_schemas.AddressDetailUpdate
    ]
):
    def __init__(self):
        super().__init__(model=adr_models.AddressDetail)

    async def get_for_partner(
        self, db: AsyncSession, *, partner_id: str, detail_id: str
    ) -> Optional[adr_models.AddressDetail]:
        query = select(self.model).where(self.model.id == detail_id, self.model.partner_id == partner_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def get_by_partner(self, db: AsyncSession, *, partner_id: str) -> List[adr_models.AddressDetail]:
        """Address links of a partner, primary first, then by address type."""
        query = (
            select(self.model)
            .where(self.model.partner_id == partner_id)
            .order_by(self.model.is_primary.desc(), self.model.address_type)
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def count_for_address(self, db: AsyncSession, *, address_id: str) -> int:
        query = select(func.count()).select_from(self.model).where(self.model.address_id == address_id)
        result = await db.execute(query)
        return result.scalar_one()

    async def _clear_other_primaries(
        self, db: AsyncSession, *, partner_id: str, exclude_id: Optional[str] = None
    ) -> None:
        statement = (
            update(self.model)
            .where(self.model.partner_id == partner_id, self.model.is_primary.is_(True))
            .values(is_primary=False)
        )
        if exclude_id is not None:
            statement = statement.where(self.model.id != exclude_id)
        await db.execute(statement)

    async def create_for_partner(
        self,
        db: AsyncSession,
        *,
        partner_id: str,
        address: adr_models.Address,
        obj_in: adr_schemas.AddressDetailCreate,
    ) -> adr_models.AddressDetail:
        """
        Links an address to a partner. A new primary link replaces the
        previous primary link of the partner.
        """
        if obj_in.is_primary:
            await self._clear_other_primaries(db, partner_id=partner_id)
        db_obj = adr_models.AddressDetail.model_validate(
            obj_in, update={"partner_id": partner_id, "address_id": address.id}
        )
        db_obj.address = address
        db.add(db_obj)
        await self.commit_or_400(db, "Could not link address to partner")
        db_obj = await self.reload(db, db_obj=db_obj)
        logger.info("Address %s linked to partner %s as %s", address.id, partner_id, db_obj.address_type)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: adr_models.AddressDetail,
        obj_in: adr_schemas.AddressDetailUpdate
    ) -> adr_models.AddressDetail:
        check_validity_or_400(db_obj, obj_in)
        if obj_in.is_primary:
            await self._clear_other_primaries(db, partner_id=db_obj.partner_id, exclude_id=db_obj.id)
        db_obj = await super().update(db, db_obj=db_obj, obj_in=obj_in)
        return await self.reload(db, db_obj=db_obj)


address = CRUDAddress()
address_detail = CRUDAddressDetail()
