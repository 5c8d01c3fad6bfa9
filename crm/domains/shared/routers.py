# crm/domains/shared/routers.py

"""
Public endpoints of the 'shared' domain.

These routes need no database access and are mounted outside the versioned
API prefix (/public).
"""

from fastapi import APIRouter

from crm.core.config import settings

from . import schemas as shared_schemas

router = APIRouter(
    tags=["Public"],
)


@router.get("/config", response_model=shared_schemas.PublicConfigRead, summary="Public client configuration")
async def read_public_config():
    """
    Returns the configuration a browser client needs at startup:
    its log level, the build timestamp and the default address country.
    """
    return shared_schemas.PublicConfigRead(
        log_level=settings.CLIENT_LOG_LEVEL,
        baseline_build_timestamp=settings.BUILD_TIMESTAMP,
        default_country=settings.DEFAULT_COUNTRY,
    )
