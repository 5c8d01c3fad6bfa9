# crm/domains/adr/models.py

"""
Database ORM models of the 'adr' domain (addresses).

An address is a shared physical location. Partners use it through
address_details rows, which carry the role (billing, shipping, ...) and the
primary flag of the link.
"""

from enum import Enum
from typing import Optional
from datetime import date, datetime, UTC

from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from crm.domains.prt.models import new_uuid


class AddressType(str, Enum):
    BILLING = "BILLING"
    SHIPPING = "SHIPPING"
    HOME = "HOME"
    WORK = "WORK"
    OTHER = "OTHER"


# =============================================================================
# 1. addresses
# =============================================================================
class AddressBase(SQLModel):
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    street_line1: Optional[str] = Field(default=None, max_length=255)
    street_line2: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100, index=True)
    state_province: Optional[str] = Field(default=None, max_length=100)
    postal_code: Optional[str] = Field(default=None, max_length=20)
    country_code: Optional[str] = Field(default=None, max_length=2, description="ISO 3166-1 alpha-2")
    is_verified: bool = Field(default=False, nullable=False)
    valid_from: Optional[date] = Field(default=None)
    valid_to: Optional[date] = Field(default=None)

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now())
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())
    )


class Address(AddressBase, table=True):
    __tablename__ = "addresses"

    def format_line(self) -> str:
        """One-line rendering, e.g. '123 Main St, 8000 Springfield, ZH, CH'."""
        locality = " ".join(p for p in (self.postal_code, self.city) if p)
        parts = [self.street_line1, self.street_line2, locality, self.state_province, self.country_code]
        return ", ".join(p.strip() for p in parts if p and p.strip())


# =============================================================================
# 2. address_details (partner <-> address link)
# =============================================================================
class AddressDetailBase(SQLModel):
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    partner_id: str = Field(foreign_key="partners.id", index=True, nullable=False, max_length=36)
    address_id: str = Field(foreign_key="addresses.id", index=True, nullable=False, max_length=36)
    address_type: AddressType = Field(default=AddressType.BILLING, nullable=False)
    is_primary: bool = Field(default=False, nullable=False)
    valid_from: Optional[date] = Field(default=None)
    valid_to: Optional[date] = Field(default=None)

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now())
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())
    )


class AddressDetail(AddressDetailBase, table=True):
    __tablename__ = "address_details"

    address: Optional[Address] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
