# crm/core/__init__.py

"""
Core components shared by every domain of the application.

- `config.py`: application settings (Pydantic Settings).
- `database.py`: async engine and session management (SQLModel + SQLAlchemy).
- `dependencies.py`: FastAPI dependency functions.
- `crud_base.py`: generic async CRUD base class.
- `logging.py`: logging configuration.
- `tasks.py`: arq tasks that are not tied to a domain.
"""

__title__ = "Partner CRM Core"
__all__ = []
