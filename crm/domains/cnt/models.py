# crm/domains/cnt/models.py

"""
Database ORM models of the 'cnt' domain (contact details of partners).
"""

from typing import Optional
from datetime import datetime, UTC

from sqlmodel import Field, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from crm.domains.prt.models import new_uuid

# contact types offered by the client; other values are stored as given
CONTACT_TYPES = ("EMAIL", "PHONE", "MOBILE", "FAX", "WEBSITE", "LINKEDIN", "OTHER")


# =============================================================================
# 1. contact_details
# =============================================================================
class ContactDetailBase(SQLModel):
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    partner_id: str = Field(foreign_key="partners.id", index=True, nullable=False, max_length=36)
    contact_type: Optional[str] = Field(default=None, max_length=50, index=True)
    contact_value: str = Field(max_length=255, nullable=False)
    label: Optional[str] = Field(default=None, max_length=100)
    is_primary: bool = Field(default=False, nullable=False)
    is_verified: bool = Field(default=False, nullable=False)

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now())
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())
    )


class ContactDetail(ContactDetailBase, table=True):
    __tablename__ = "contact_details"
