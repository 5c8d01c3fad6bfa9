# crm/__init__.py

"""
Main package of the Partner CRM FastAPI application.

The package holds the application entry point (main.py), the `core`
subpackage with shared configuration, database access and logging setup,
and the `domains` subpackage with one package per business domain.
"""

APP_NAME = "Partner CRM API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # common prefix of the domain routers (applied in main.py)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Partner (natural person / legal entity) CRM API backend."
__all__ = []
