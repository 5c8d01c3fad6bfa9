# crm/core/tasks.py

import logging
from typing import Any, Dict

from sqlmodel import select

from crm.core.database import get_async_session_context

logger = logging.getLogger(__name__)


async def health_check_database_task(ctx: Dict[str, Any]) -> Dict[str, str]:
    """
    Periodic database health check run by the arq worker.
    """
    logger.info("arq task: database health check")

    try:
        async with get_async_session_context() as db:
            result = await db.execute(select(1))
            if result.scalar_one_or_none() == 1:
                logger.info("Database health check: connection successful.")
                return {"status": "success", "message": "Database connection successful."}
            error_msg = "Database health check failed: No result from test query."
            logger.warning(error_msg)
            return {"status": "failed", "message": error_msg}
    except Exception as e:
        error_msg = f"Database connection error: {e}"
        logger.error("Database health check failed - %s", error_msg)
        return {"status": "failed", "message": error_msg}
