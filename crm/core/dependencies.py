# crm/core/dependencies.py

"""
Dependency functions shared by the routers of every domain.
"""

from typing import AsyncGenerator

from fastapi import Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.core.database import get_session as get_main_app_session
from crm.domains.prt import crud as prt_crud
from crm.domains.prt import models as prt_models


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async database session for FastAPI dependency injection.
    Wraps crm.core.database.get_session.
    """
    async for session in get_main_app_session():
        yield session


async def get_partner_or_404(
    partner_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> prt_models.Partner:
    """Resolves the `partner_id` path parameter of the nested partner routes."""
    partner = await prt_crud.partner.get(db, id=partner_id)
    if partner is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Partner not found")
    return partner
