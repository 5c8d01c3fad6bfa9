# crm/domains/adr/routers.py

"""
API endpoints of the 'adr' domain (addresses).

- `router`: the address book (/address).
- `partner_router`: address links of a partner (/partner/{partner_id}/address).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core import dependencies as deps
from crm.domains.prt import models as prt_models

from . import crud as adr_crud
from . import schemas as adr_schemas
from .countries import country_names

router = APIRouter(
    tags=["Address Management"],
    responses={404: {"description": "Not found"}},
)

partner_router = APIRouter(
    tags=["Partner Addresses"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. Address API
# =============================================================================
@router.get("", response_model=List[adr_schemas.AddressRead], summary="Search addresses")
async def read_addresses(
    search: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Addresses ordered by city and street.
    - **search**: optional term matched against every text column
    """
    return [adr_schemas.AddressRead.model_validate(a) for a in await adr_crud.address.search(db, term=search)]


@router.get("/countries", response_model=List[adr_schemas.CountryRead], summary="List countries")
async def read_countries():
    """ISO country codes offered by the address forms, ordered by name."""
    return [
        adr_schemas.CountryRead(code=code, name=name)
        for code, name in sorted(country_names().items(), key=lambda item: item[1])
    ]


@router.get("/{address_id}", response_model=adr_schemas.AddressRead, summary="Get an address")
async def read_address(address_id: str, db: AsyncSession = Depends(deps.get_db_session)):
    db_address = await adr_crud.address.get(db, id=address_id)
    if not db_address:
        raise HTTPException(status_code=404, detail="Address not found")
    return adr_schemas.AddressRead.model_validate(db_address)


@router.post(
    "",
    response_model=adr_schemas.AddressRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an address",
)
async def create_address(
    address_in: adr_schemas.AddressCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_address = await adr_crud.address.create(db, obj_in=address_in)
    return adr_schemas.AddressRead.model_validate(db_address)


@router.put("/{address_id}", response_model=adr_schemas.AddressRead, summary="Update an address")
async def update_address(
    address_id: str,
    address_in: adr_schemas.AddressUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_address = await adr_crud.address.get(db, id=address_id)
    if not db_address:
        raise HTTPException(status_code=404, detail="Address not found")
    db_address = await adr_crud.address.update(db, db_obj=db_address, obj_in=address_in)
    return adr_schemas.AddressRead.model_validate(db_address)


@router.delete("/{address_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an address")
async def delete_address(address_id: str, db: AsyncSession = Depends(deps.get_db_session)):
    """
    Deletes an address. Addresses still linked to a partner are refused with 400.
    """
    db_address = await adr_crud.address.get(db, id=address_id)
    if not db_address:
        raise HTTPException(status_code=404, detail="Address not found")
    await adr_crud.address.remove(db, db_obj=db_address)
    return None


# =============================================================================
# 2. Partner address link API
# =============================================================================
@partner_router.get(
    "/{partner_id}/address",
    response_model=List[adr_schemas.AddressDetailRead],
    summary="List the addresses of a partner",
)
async def read_partner_addresses(
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """Address links of the partner, primary first."""
    details = await adr_crud.address_detail.get_by_partner(db, partner_id=partner.id)
    return [adr_schemas.AddressDetailRead.model_validate(d) for d in details]


@partner_router.post(
    "/{partner_id}/address",
    response_model=adr_schemas.AddressDetailRead,
    status_code=status.HTTP_201_CREATED,
    summary="Link an address to a partner",
)
async def create_partner_address(
    address_id: str,
    detail_in: Optional[adr_schemas.AddressDetailCreate] = None,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    Links an existing address to the partner.
    - **address_id** (query): the address to link
    - body: address type, primary flag and validity period
    """
    db_address = await adr_crud.address.get(db, id=address_id)
    if not db_address:
        raise HTTPException(status_code=404, detail="Address not found")
    detail = await adr_crud.address_detail.create_for_partner(
        db, partner_id=partner.id, address=db_address, obj_in=detail_in or adr_schemas.AddressDetailCreate()
    )
    return adr_schemas.AddressDetailRead.model_validate(detail)


@partner_router.put(
    "/{partner_id}/address/{detail_id}",
    response_model=adr_schemas.AddressDetailRead,
    summary="Update an address link",
)
async def update_partner_address(
    detail_id: str,
    detail_in: adr_schemas.AddressDetailUpdate,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    detail = await adr_crud.address_detail.get_for_partner(db, partner_id=partner.id, detail_id=detail_id)
    if not detail:
        raise HTTPException(status_code=404, detail="Address detail not found")
    detail = await adr_crud.address_detail.update(db, db_obj=detail, obj_in=detail_in)
    return adr_schemas.AddressDetailRead.model_validate(detail)


@partner_router.delete(
    "/{partner_id}/address/{detail_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unlink an address from a partner",
)
async def delete_partner_address(
    detail_id: str,
    partner: prt_models.Partner = Depends(deps.get_partner_or_404),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """Removes the link; the address itself stays in the address book."""
    detail = await adr_crud.address_detail.get_for_partner(db, partner_id=partner.id, detail_id=detail_id)
    if not detail:
        raise HTTPException(status_code=404, detail="Address detail not found")
    await adr_crud.address_detail.delete(db, id=detail.id)
    return None
