# crm/domains/prt/tasks.py

"""
arq tasks of the 'prt' domain.
"""

import logging
from typing import Any, Dict, Optional

from crm.core.config import settings
from crm.core.database import get_async_session_context
from . import services as prt_services

logger = logging.getLogger(__name__)


async def export_partners_task(ctx: Dict[str, Any], path: Optional[str] = None) -> Dict[str, Any]:
    """
    Exports every partner to the configured text file.
    Scheduled nightly by the arq worker and enqueued by POST /partner/export.
    """
    target = path or settings.PARTNER_EXPORT_PATH
    try:
        async with get_async_session_context() as db:
            count = await prt_services.export_partners(db, path=target)
    except Exception as e:
        logger.error("Partner export task failed: %s", e)
        return {"status": "failed", "message": str(e), "path": target}
    return {"status": "success", "exported_count": count, "path": target}
