# crm/main.py

"""
Entry point of the Partner CRM FastAPI application and of its arq worker.

- Registers the domain routers under the versioned API prefix.
- Creates the arq Redis pool and the database tables on startup.
- Defines `ArqWorkerSettings` for `arq crm.main.ArqWorkerSettings`.
"""

import logging
from typing import Any, AsyncGenerator, Dict
from contextlib import asynccontextmanager

from arq import cron
from arq.connections import create_pool, RedisSettings
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm import API_PREFIX
from crm.core.config import settings
from crm.core.database import engine, get_session, create_db_and_tables
from crm.core.logging import setup_logging

# Task modules
from crm.core import tasks as core_tasks
from crm.domains.prt import tasks as prt_tasks

# Domain routers
from crm.domains.prt.routers import router as prt_router
from crm.domains.adr.routers import router as adr_router, partner_router as adr_partner_router
from crm.domains.cnt.routers import router as cnt_router, partner_router as cnt_partner_router
from crm.domains.tag.routers import router as tag_router, partner_router as tag_partner_router
from crm.domains.rel.routers import router as rel_router, partner_router as rel_partner_router
from crm.domains.shared.routers import router as shared_router

logger = logging.getLogger(__name__)

# Task functions run by the arq worker
worker_functions = [
    core_tasks.health_check_database_task,
    prt_tasks.export_partners_task,
]


async def worker_startup(ctx: Dict[str, Any]) -> None:
    """arq worker startup: the worker process configures logging like the API does."""
    setup_logging()
    logger.info("arq worker started with %d function(s)", len(worker_functions))


class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    on_startup = worker_startup
    cron_jobs = [
        cron(
            core_tasks.health_check_database_task,
            name="daily_db_health_check",
            hour=0, minute=0,
            timeout=300,
            keep_result=600,
        ),
        cron(
            prt_tasks.export_partners_task,
            name="nightly_partner_export",
            hour=2, minute=0,  # every day at 02:00
            timeout=1800,
            keep_result=3600,
        ),
    ]


# -- Application lifespan --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup and shutdown of the database engine and the arq Redis pool.
    Without Redis the application still starts; jobs then run inline.
    """
    setup_logging()
    logger.info("Starting %s %s (%s)...", settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV)

    await create_db_and_tables()

    app.state.redis = None
    try:
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("arq Redis pool created.")
    except Exception as e:
        logger.warning("arq Redis pool unavailable, background jobs run inline: %s", e)

    yield

    logger.info("Shutting down %s...", settings.APP_NAME)
    if app.state.redis is not None:
        await app.state.redis.close()
        logger.info("arq Redis pool closed.")
    await engine.dispose()
    logger.info("Database connection pool closed.")


# -- FastAPI application --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# -- CORS --
# allow_origins should be restricted to the frontend origin in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- Domain routers --
# Nested partner resources share the /partner prefix with the partner router.
PARTNER_PREFIX = f"{API_PREFIX}/partner"

app.include_router(prt_router, prefix=PARTNER_PREFIX)
app.include_router(adr_partner_router, prefix=PARTNER_PREFIX)
app.include_router(cnt_partner_router, prefix=PARTNER_PREFIX)
app.include_router(tag_partner_router, prefix=PARTNER_PREFIX)
app.include_router(rel_partner_router, prefix=PARTNER_PREFIX)

app.include_router(adr_router, prefix=f"{API_PREFIX}/address")
app.include_router(cnt_router, prefix=f"{API_PREFIX}/contact")
app.include_router(tag_router, prefix=f"{API_PREFIX}/tag")
app.include_router(rel_router, prefix=f"{API_PREFIX}/relationship-type")
app.include_router(shared_router, prefix="/public")


# -- Root endpoint --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    Root of the API with a pointer to the interactive documentation.
    """
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- Health check --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Runs a trivial query to verify the database connection.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database health check failed: No result from test query"
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Health check failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
