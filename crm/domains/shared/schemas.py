# crm/domains/shared/schemas.py

"""
Response schemas of the 'shared' domain.
"""

from sqlmodel import SQLModel


class PublicConfigRead(SQLModel):
    """Client-side configuration handed to the frontend without authentication."""
    log_level: str
    baseline_build_timestamp: str
    default_country: str
