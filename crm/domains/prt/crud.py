# crm/domains/prt/crud.py

"""
CRUD logic of the 'prt' domain (partners).
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import String, cast, delete, func, literal, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core.crud_base import CRUDBase
from . import models as prt_models
from . import schemas as prt_schemas

logger = logging.getLogger(__name__)

UNKNOWN_TYPE_DETAIL = (
    "Cannot determine partner type from request. Provide either first_name/last_name "
    "for a natural person or legal_name for a legal entity."
)


class CRUDPartner(CRUDBase[prt_models.Partner, prt_schemas.PartnerCreate, prt_schemas.PartnerUpdate]):
    default_order_by = ("partner_number_seq",)

    def __init__(self):
        super().__init__(model=prt_models.Partner)

    # -------------------------------------------------------------------------
    # partner number sequence
    # -------------------------------------------------------------------------
    async def next_partner_number(self, db: AsyncSession) -> int:
        """
        Hands out the next partner number from the partner_sequence row.
        The row is created on first use.
        """
        result = await db.execute(
            update(prt_models.PartnerSequence)
            .where(prt_models.PartnerSequence.id == 1)
            .values(next_val=prt_models.PartnerSequence.next_val + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            # first partner: seed the sequence past the number handed out now
            db.add(prt_models.PartnerSequence(id=1, next_val=2))
            await db.flush()
            return 1

        seq_result = await db.execute(
            select(prt_models.PartnerSequence.next_val).where(prt_models.PartnerSequence.id == 1)
        )
        return seq_result.scalar_one() - 1

    # -------------------------------------------------------------------------
    # queries
    # -------------------------------------------------------------------------
    async def get_by_number(self, db: AsyncSession, *, partner_number_seq: int) -> Optional[prt_models.Partner]:
        return await self.get_by_attribute(db, attribute="partner_number_seq", value=partner_number_seq)

    def formatted_number_expr(self):
        """SQL form of `Partner.partner_number`: 'P' followed by the zero-padded sequence."""
        digits = cast(self.model.partner_number_seq, String)
        padded = func.substr(literal("00000000", String) + digits, func.length(digits) + 1, 8, type_=String)
        return literal("P", String) + padded

    async def search(self, db: AsyncSession, *, term: Optional[str]) -> List[prt_models.Partner]:
        """
        Partners matching `term` in the partner number, notes, person names,
        legal/trading name or registration number, ordered by partner number.
        A blank term returns every partner.
        """
        query = select(self.model).order_by(self.model.partner_number_seq)
        if term and term.strip():
            needle = term.strip()
            pattern = f"%{needle}%"
            query = query.where(
                or_(
                    self.formatted_number_expr().ilike(pattern),
                    self.model.notes.ilike(pattern),
                    self.model.first_name.ilike(pattern),
                    self.model.last_name.ilike(pattern),
                    self.model.legal_name.ilike(pattern),
                    self.model.trading_name.ilike(pattern),
                    self.model.registration_number.ilike(pattern),
                )
            )
        result = await db.execute(query)
        return result.scalars().all()

    # -------------------------------------------------------------------------
    # writes
    # -------------------------------------------------------------------------
    @staticmethod
    def _fields_for_type(data: dict, partner_type: prt_models.PartnerType) -> dict:
        """Drops the columns that belong to the other partner kind."""
        foreign = (
            prt_schemas.LEGAL_ENTITY_FIELDS
            if partner_type == prt_models.PartnerType.NATURAL_PERSON
            else prt_schemas.NATURAL_PERSON_FIELDS
        )
        return {k: v for k, v in data.items() if k not in foreign}

    async def create(self, db: AsyncSession, *, obj_in: prt_schemas.PartnerCreate) -> prt_models.Partner:
        """
        Creates a natural person or legal entity depending on the request body.
        New partners are always active and get the next partner number.
        """
        partner_type = obj_in.resolve_partner_type()
        if partner_type is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=UNKNOWN_TYPE_DETAIL)

        data = self._fields_for_type(obj_in.model_dump(exclude={"partner_type"}), partner_type)
        db_obj = prt_models.Partner(
            **data,
            partner_type=partner_type,
            is_active=True,
            partner_number_seq=await self.next_partner_number(db),
        )
        db.add(db_obj)
        await self.commit_or_400(db, "Could not create partner")
        await db.refresh(db_obj)
        logger.info("Partner %s created (%s)", db_obj.partner_number, partner_type.value)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: prt_models.Partner, obj_in: prt_schemas.PartnerUpdate
    ) -> prt_models.Partner:
        """
        Updates the fields set on the request. The body must identify the
        partner kind like a create request does. The partner number and the
        creation time never change; switching the partner kind is refused.
        """
        requested_type = obj_in.resolve_partner_type()
        if requested_type is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=UNKNOWN_TYPE_DETAIL)
        if requested_type != db_obj.partner_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Partner type cannot be changed from {db_obj.partner_type.value} to {requested_type.value}",
            )

        update_data = self._fields_for_type(
            obj_in.model_dump(exclude_unset=True, exclude={"partner_type"}), db_obj.partner_type
        )
        if "is_active" in update_data and update_data["is_active"] is None:
            del update_data["is_active"]
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await self.commit_or_400(db, "Could not update partner")
        await db.refresh(db_obj)
        return db_obj

    async def remove(self, db: AsyncSession, *, db_obj: prt_models.Partner) -> prt_models.Partner:
        """
        Deletes a partner together with its contacts, address links, tag
        assignments and relationships. Shared addresses and tags are kept.
        """
        # imported here: the owning domains import the partner models
        from crm.domains.adr.models import AddressDetail
        from crm.domains.cnt.models import ContactDetail
        from crm.domains.rel.models import PartnerRelationship, SMERelationship
        from crm.domains.tag.models import PartnerTag

        partner_id = db_obj.id
        for model in (ContactDetail, AddressDetail, PartnerTag, SMERelationship):
            await db.execute(delete(model).where(model.partner_id == partner_id))
        await db.execute(
            delete(PartnerRelationship).where(
                or_(
                    PartnerRelationship.from_partner_id == partner_id,
                    PartnerRelationship.to_partner_id == partner_id,
                )
            )
        )
        await db.delete(db_obj)
        await self.commit_or_400(db, "Cannot delete partner due to existing related data.")
        logger.info("Partner %s deleted", db_obj.partner_number)
        return db_obj


partner = CRUDPartner()
