# crm/domains/tag/routers.py

"""
API endpoints of the 'tag' domain.

- `router`: tag catalogue (/tag).
- `partner_router`: tags of a partner (/partner/{partner_id}/tag).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core import dependencies as deps
from crm.domains.prt import models as prt_models

from . import crud as tag_crud
from . import schemas as tag_schemas

router = APIRouter(
    tags=["Tag Management"],
    responses={404: {"description": "Not found"}},
)

partner_router = APIRouter(
    tags=["Partner Tags"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. Tag API
# =============================================================================
@router.get("", response_model=List[tag_schemas.TagRead], summary="Search tags")
async def read_tags(
    search: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """Tags ordered by name, optionally filtered by name or description."""
    return [tag_schemas.TagRead.model_validate(t) for t in await tag_crud.tag.search(db, term=search)]


@router.get("/{tag_id}", response_model=tag_schemas.TagRead, summary="Get a tag")
async def read_tag(tag_id: str, db: AsyncSession = Depends(deps.get_db_session)):
    db_tag = await tag_crud.tag.get(db, id=tag_id)
    if not db_tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    return tag_schemas.TagRead.model_validate(db_tag)


@router.post(
    "",
    response_model=tag_schemas.TagRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tag",
)
async def create_tag(tag_in: tag_schemas.TagCreate, db: AsyncSession = Depends(deps.get_db_session)):
    """
    Creates a tag.
    - **tag_name**: unique name (required)
    - **color_hex**: display color '#RRGGBB' (optional)
    """
    db_tag = await tag_crud.tag.create(db, obj_in=tag_in)
    return tag_schemas.TagRead.model_validate(db_tag)


@router.put("/{tag_id}", response_model=tag_schemas.TagRead, summary="Update a tag")
async def update_tag(
    tag_id: str,
    tag_in: tag_schemas.TagUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_tag = await tag_crud.tag.get(db, id=tag_id)
    if not db_tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    db_tag = await tag_crud.tag.update(db, db_obj=db_tag, obj_in=tag_in)
    return tag_schemas.TagRead.model_validate(db_tag)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a tag")
async def delete_tag(tag_id: str, db: AsyncSession = Depends(deps.get_db_session)):
    """Deletes a tag. Tags still assigned to a partner are refused with 400."""
    db_tag = await tag_crud.tag.get(db, id=tag_id)
    if not db_tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    await tag_crud.tag.remove(db, db_obj=db_tag)
    return None


# =============================================================================
# 2. Partner tag API
# =============================================================================
@partner_router.get(
    "/{partner_id}/tag",
    response_model=List[tag_schemas.TagRead],
    summary="List the tags of a partner",
)
async def read_partner_tags(
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    tags = await tag_crud.partner_tag.get_tags_by_partner(db, partner_id=partner.id)
    return [tag_schemas.TagRead.model_validate(t) for t in tags]


@partner_router.post(
    "/{partner_id}/tag/{tag_id}",
    response_model=tag_schemas.PartnerTagRead,
    status_code=status.HTTP_201_CREATED,
    summary="Assign a tag to a partner",
)
async def add_partner_tag(
    tag_id: str,
    tagged_by: Optional[str] = None,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_tag = await tag_crud.tag.get(db, id=tag_id)
    if not db_tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    link = await tag_crud.partner_tag.add_tag(db, partner_id=partner.id, tag=db_tag, tagged_by=tagged_by)
    return tag_schemas.PartnerTagRead.model_validate(link)


@partner_router.delete(
    "/{partner_id}/tag/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a tag from a partner",
)
async def remove_partner_tag(
    tag_id: str,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    await tag_crud.partner_tag.remove_tag(db, partner_id=partner.id, tag_id=tag_id)
    return None
