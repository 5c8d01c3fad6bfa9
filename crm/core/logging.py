# crm/core/logging.py

"""
Logging setup of the API process and the arq worker.
"""

import logging
from typing import Optional

from crm.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configures the root logger once; later calls only adjust the level."""
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=level_name, format=LOG_FORMAT)
    logging.getLogger().setLevel(level_name)

    # SQL statements are only echoed in debug mode
    if not settings.DEBUG_MODE:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
