# crm/domains/prt/routers.py

"""
API endpoints of the 'prt' domain (partners).

Nested partner resources (addresses, contacts, tags, relationships) are
served by the routers of their own domains under the same /partner prefix.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core import dependencies as deps
from crm.core.config import settings

from . import crud as prt_crud
from . import models as prt_models
from . import schemas as prt_schemas
from . import services as prt_services

router = APIRouter(
    tags=["Partner Management"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. Partner API
# =============================================================================
@router.get(
    "",
    response_model=List[prt_schemas.PartnerSearchResult],
    summary="Search partners",
)
async def search_partners(
    search: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Partner overview ordered by partner number.
    - **search**: optional term matched against number, names, notes and registration number
    """
    return await prt_services.search_partners(db, term=search)


@router.post(
    "/export",
    response_model=prt_schemas.PartnerExportResult,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Export partners to the configured text file",
)
async def export_partners(
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Enqueues the partner export on the arq worker. Without a Redis pool the
    export runs inside the request.
    """
    redis = getattr(request.app.state, "redis", None)
    if redis is not None:
        job = await redis.enqueue_job("export_partners_task")
        return prt_schemas.PartnerExportResult(
            status="queued", path=settings.PARTNER_EXPORT_PATH, job_id=job.job_id if job else None
        )

    count = await prt_services.export_partners(db, path=settings.PARTNER_EXPORT_PATH)
    return prt_schemas.PartnerExportResult(
        status="success", exported_count=count, path=settings.PARTNER_EXPORT_PATH
    )


@router.get(
    "/{partner_id}",
    response_model=prt_schemas.PartnerRead,
    summary="Get a partner",
)
async def read_partner(partner: prt_models.Partner = Depends(deps.get_partner_or_404)):
    """
    Returns the natural person or legal entity with the given id.
    """
    return prt_schemas.to_partner_read(partner)


@router.post(
    "",
    response_model=prt_schemas.PartnerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a partner",
)
async def create_partner(
    partner_in: prt_schemas.PartnerCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Creates a partner. `first_name`/`last_name` create a natural person,
    `legal_name` a legal entity.
    """
    partner = await prt_crud.partner.create(db, obj_in=partner_in)
    return prt_schemas.to_partner_read(partner)


@router.put(
    "/{partner_id}",
    response_model=prt_schemas.PartnerRead,
    summary="Update a partner",
)
async def update_partner(
    partner_in: prt_schemas.PartnerUpdate,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Updates a partner. The partner number and kind stay unchanged.
    """
    updated = await prt_crud.partner.update(db, db_obj=partner, obj_in=partner_in)
    return prt_schemas.to_partner_read(updated)


@router.delete(
    "/{partner_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a partner",
)
async def delete_partner(
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Deletes a partner with its contacts, address links, tags and relationships.
    """
    await prt_crud.partner.remove(db, db_obj=partner)
    return None
