# crm/domains/cnt/routers.py

"""
API endpoints of the 'cnt' domain (contact details).

- `router`: contact search across partners (/contact).
- `partner_router`: contacts of a partner (/partner/{partner_id}/contact).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core import dependencies as deps
from crm.domains.prt import models as prt_models

from . import crud as cnt_crud
from . import models as cnt_models
from . import schemas as cnt_schemas

router = APIRouter(
    tags=["Contact Details"],
    responses={404: {"description": "Not found"}},
)

partner_router = APIRouter(
    tags=["Partner Contacts"],
    responses={404: {"description": "Not found"}},
)


def _to_read(contacts) -> List[cnt_schemas.ContactDetailRead]:
    return [cnt_schemas.ContactDetailRead.model_validate(c) for c in contacts]


@router.get("", response_model=List[cnt_schemas.ContactDetailRead], summary="Search contact details")
async def search_contacts(
    search: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Contacts whose value or label contains the term. A blank term returns an empty list.
    """
    return _to_read(await cnt_crud.contact_detail.search(db, term=search))


@router.get("/types", response_model=List[str], summary="List contact types")
async def read_contact_types():
    """Contact types offered by the contact forms."""
    return list(cnt_models.CONTACT_TYPES)


# =============================================================================
# Partner contact API
# =============================================================================
@partner_router.get(
    "/{partner_id}/contact",
    response_model=List[cnt_schemas.ContactDetailRead],
    summary="List the contacts of a partner",
)
async def read_partner_contacts(
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """Contacts of the partner, primary first, then by type."""
    return _to_read(await cnt_crud.contact_detail.get_by_partner(db, partner_id=partner.id))


@partner_router.get(
    "/{partner_id}/contact/type/{contact_type}",
    response_model=List[cnt_schemas.ContactDetailRead],
    summary="List the contacts of a partner by type",
)
async def read_partner_contacts_by_type(
    contact_type: str,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    contacts = await cnt_crud.contact_detail.get_by_partner_and_type(
        db, partner_id=partner.id, contact_type=contact_type
    )
    return _to_read(contacts)


@partner_router.get(
    "/{partner_id}/contact/primary/{contact_type}",
    response_model=cnt_schemas.ContactDetailRead,
    summary="Get the primary contact of a type",
)
async def read_partner_primary_contact(
    contact_type: str,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    contact = await cnt_crud.contact_detail.get_primary(db, partner_id=partner.id, contact_type=contact_type)
    if not contact:
        raise HTTPException(status_code=404, detail=f"No primary {contact_type.upper()} contact for partner")
    return cnt_schemas.ContactDetailRead.model_validate(contact)


@partner_router.get(
    "/{partner_id}/contact/{contact_id}",
    response_model=cnt_schemas.ContactDetailRead,
    summary="Get a contact of a partner",
)
async def read_partner_contact(
    contact_id: str,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    contact = await cnt_crud.contact_detail.get_for_partner(db, partner_id=partner.id, contact_id=contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact detail not found")
    return cnt_schemas.ContactDetailRead.model_validate(contact)


@partner_router.post(
    "/{partner_id}/contact",
    response_model=cnt_schemas.ContactDetailRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add a contact to a partner",
)
async def create_partner_contact(
    contact_in: cnt_schemas.ContactDetailCreate,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Adds a contact. A primary contact replaces the previous primary contact
    of the same type.
    """
    contact = await cnt_crud.contact_detail.create_for_partner(db, partner_id=partner.id, obj_in=contact_in)
    return cnt_schemas.ContactDetailRead.model_validate(contact)


@partner_router.put(
    "/{partner_id}/contact/{contact_id}",
    response_model=cnt_schemas.ContactDetailRead,
    summary="Update a contact of a partner",
)
async def update_partner_contact(
    contact_id: str,
    contact_in: cnt_schemas.ContactDetailUpdate,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    contact = await cnt_crud.contact_detail.get_for_partner(db, partner_id=partner.id, contact_id=contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact detail not found")
    contact = await cnt_crud.contact_detail.update(db, db_obj=contact, obj_in=contact_in)
    return cnt_schemas.ContactDetailRead.model_validate(contact)


@partner_router.delete(
    "/{partner_id}/contact/{contact_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a contact of a partner",
)
async def delete_partner_contact(
    contact_id: str,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    contact = await cnt_crud.contact_detail.get_for_partner(db, partner_id=partner.id, contact_id=contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact detail not found")
    await cnt_crud.contact_detail.delete(db, id=contact.id)
    return None
