# crm/domains/rel/routers.py

"""
API endpoints of the 'rel' domain.

- `router`: relationship type catalogue (/relationship-type).
- `partner_router`: relationships and SME relationships of a partner
  (/partner/{partner_id}/relationship, /partner/{partner_id}/sme-relationship).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core import dependencies as deps
from crm.domains.prt import models as prt_models

from . import crud as rel_crud
from . import schemas as rel_schemas

router = APIRouter(
    tags=["Relationship Types"],
    responses={404: {"description": "Not found"}},
)

partner_router = APIRouter(
    tags=["Partner Relationships"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. RelationshipType API
# =============================================================================
@router.get("", response_model=List[rel_schemas.RelationshipTypeRead], summary="Search relationship types")
async def read_relationship_types(
    search: Optional[str] = None,
    active_only: bool = False,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Relationship types ordered by name.
    - **search**: optional term matched against name and description
    - **active_only**: only return active types
    """
    types = await rel_crud.relationship_type.search(db, term=search, active_only=active_only)
    return [rel_schemas.RelationshipTypeRead.model_validate(t) for t in types]


@router.get("/{type_id}", response_model=rel_schemas.RelationshipTypeRead, summary="Get a relationship type")
async def read_relationship_type(type_id: str, db: AsyncSession = Depends(deps.get_db_session)):
    db_type = await rel_crud.relationship_type.get(db, id=type_id)
    if not db_type:
        raise HTTPException(status_code=404, detail="Relationship type not found")
    return rel_schemas.RelationshipTypeRead.model_validate(db_type)


@router.post(
    "",
    response_model=rel_schemas.RelationshipTypeRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a relationship type",
)
async def create_relationship_type(
    type_in: rel_schemas.RelationshipTypeCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_type = await rel_crud.relationship_type.create(db, obj_in=type_in)
    return rel_schemas.RelationshipTypeRead.model_validate(db_type)


@router.put("/{type_id}", response_model=rel_schemas.RelationshipTypeRead, summary="Update a relationship type")
async def update_relationship_type(
    type_id: str,
    type_in: rel_schemas.RelationshipTypeUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_type = await rel_crud.relationship_type.get(db, id=type_id)
    if not db_type:
        raise HTTPException(status_code=404, detail="Relationship type not found")
    db_type = await rel_crud.relationship_type.update(db, db_obj=db_type, obj_in=type_in)
    return rel_schemas.RelationshipTypeRead.model_validate(db_type)


@router.delete("/{type_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a relationship type")
async def delete_relationship_type(type_id: str, db: AsyncSession = Depends(deps.get_db_session)):
    """Deletes a relationship type. Types still in use are refused with 400."""
    db_type = await rel_crud.relationship_type.get(db, id=type_id)
    if not db_type:
        raise HTTPException(status_code=404, detail="Relationship type not found")
    await rel_crud.relationship_type.remove(db, db_obj=db_type)
    return None


# =============================================================================
# 2. PartnerRelationship API
# =============================================================================
@partner_router.get(
    "/{partner_id}/relationship",
    response_model=List[rel_schemas.PartnerRelationshipRead],
    summary="List the relationships of a partner",
)
async def read_partner_relationships(
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """Relationships where the partner is on either side, latest first."""
    relationships = await rel_crud.partner_relationship.get_by_partner(db, partner_id=partner.id)
    return [rel_schemas.PartnerRelationshipRead.model_validate(r) for r in relationships]


@partner_router.post(
    "/{partner_id}/relationship",
    response_model=rel_schemas.PartnerRelationshipRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a relationship to another partner",
)
async def create_partner_relationship(
    partner_id: str,
    related_partner_id: str,
    relationship_in: rel_schemas.PartnerRelationshipCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Creates a relationship from the partner in the path to `related_partner_id`.
    """
    relationship = await rel_crud.partner_relationship.create_between(
        db, from_partner_id=partner_id, to_partner_id=related_partner_id, obj_in=relationship_in
    )
    return rel_schemas.PartnerRelationshipRead.model_validate(relationship)


@partner_router.put(
    "/{partner_id}/relationship/{relationship_id}",
    response_model=rel_schemas.PartnerRelationshipRead,
    summary="Update a relationship",
)
async def update_partner_relationship(
    relationship_id: str,
    relationship_in: rel_schemas.PartnerRelationshipUpdate,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    relationship = await rel_crud.partner_relationship.get_for_partner(
        db, partner_id=partner.id, relationship_id=relationship_id
    )
    if not relationship:
        raise HTTPException(status_code=404, detail="Relationship not found")
    relationship = await rel_crud.partner_relationship.update(db, db_obj=relationship, obj_in=relationship_in)
    return rel_schemas.PartnerRelationshipRead.model_validate(relationship)


@partner_router.delete(
    "/{partner_id}/relationship/{relationship_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a relationship",
)
async def delete_partner_relationship(
    relationship_id: str,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    relationship = await rel_crud.partner_relationship.get_for_partner(
        db, partner_id=partner.id, relationship_id=relationship_id
    )
    if not relationship:
        raise HTTPException(status_code=404, detail="Relationship not found")
    await rel_crud.partner_relationship.delete(db, id=relationship.id)
    return None


# =============================================================================
# 3. SMERelationship API
# =============================================================================
@partner_router.get(
    "/{partner_id}/sme-relationship",
    response_model=List[rel_schemas.SMERelationshipRead],
    summary="List the SME relationships of a partner",
)
async def read_sme_relationships(
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    items = await rel_crud.sme_relationship.get_by_partner(db, partner_id=partner.id)
    return [rel_schemas.SMERelationshipRead.model_validate(i) for i in items]


@partner_router.post(
    "/{partner_id}/sme-relationship",
    response_model=rel_schemas.SMERelationshipRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an SME relationship",
)
async def create_sme_relationship(
    sme_in: rel_schemas.SMERelationshipCreate,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    item = await rel_crud.sme_relationship.create_for_partner(db, partner_id=partner.id, obj_in=sme_in)
    return rel_schemas.SMERelationshipRead.model_validate(item)


@partner_router.put(
    "/{partner_id}/sme-relationship/{sme_id}",
    response_model=rel_schemas.SMERelationshipRead,
    summary="Update an SME relationship",
)
async def update_sme_relationship(
    sme_id: str,
    sme_in: rel_schemas.SMERelationshipUpdate,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    item = await rel_crud.sme_relationship.get_for_partner(db, partner_id=partner.id, sme_id=sme_id)
    if not item:
        raise HTTPException(status_code=404, detail="SME relationship not found")
    item = await rel_crud.sme_relationship.update(db, db_obj=item, obj_in=sme_in)
    return rel_schemas.SMERelationshipRead.model_validate(item)


@partner_router.delete(
    "/{partner_id}/sme-relationship/{sme_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an SME relationship",
)
async def delete_sme_relationship(
    sme_id: str,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    item = await rel_crud.sme_relationship.get_for_partner(db, partner_id=partner.id, sme_id=sme_id)
    if not item:
        raise HTTPException(status_code=404, detail="SME relationship not found")
    await rel_crud.sme_relationship.delete(db, id=item.id)
    return None
