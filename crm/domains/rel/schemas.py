# crm/domains/rel/schemas.py

"""
API data transfer objects (DTOs) of the 'rel' domain (partner relationships).
"""

from decimal import Decimal
from typing import Optional
from datetime import date, datetime

from pydantic import field_validator
from sqlmodel import SQLModel, Field

from crm.domains.prt.schemas import PartnerSummary
from crm.domains.tag.schemas import check_color_hex


def check_date_order(start: Optional[date], end: Optional[date], label: str) -> None:
    if start and end and end < start:
        raise ValueError(f"{label} end must not be before its start")


# =============================================================================
# 1. RelationshipType schemas
# =============================================================================
class RelationshipTypeBase(SQLModel):
    type_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    color_hex: Optional[str] = Field(None, max_length=7)
    is_active: bool = True


class RelationshipTypeCreate(RelationshipTypeBase):
    @field_validator("color_hex")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        return check_color_hex(value)


class RelationshipTypeUpdate(SQLModel):
    type_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    color_hex: Optional[str] = Field(None, max_length=7)
    is_active: Optional[bool] = None

    @field_validator("color_hex")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        return check_color_hex(value)


class RelationshipTypeRead(RelationshipTypeBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# =============================================================================
# 2. PartnerRelationship schemas
# =============================================================================
class PartnerRelationshipBase(SQLModel):
    relationship_type_id: Optional[str] = None
    effective_from: Optional[date] = None
    effective_to: Optional[date] = None
    notes: Optional[str] = None


class PartnerRelationshipCreate(PartnerRelationshipBase):
    pass


class PartnerRelationshipUpdate(PartnerRelationshipBase):
    pass


class PartnerRelationshipRead(PartnerRelationshipBase):
    id: str
    from_partner_id: str
    to_partner_id: str
    from_partner: Optional[PartnerSummary] = None
    to_partner: Optional[PartnerSummary] = None
    relationship_type: Optional[RelationshipTypeRead] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# =============================================================================
# 3. SMERelationship schemas
# =============================================================================
class SMERelationshipBase(SQLModel):
    relationship_type: Optional[str] = Field(None, max_length=50)
    status: Optional[str] = Field(None, max_length=50)
    relationship_start: Optional[date] = None
    relationship_end: Optional[date] = None
    payment_terms: Optional[str] = Field(None, max_length=255)
    credit_limit: Optional[Decimal] = Field(None, ge=0, max_digits=18, decimal_places=2)
    priority_level: Optional[int] = Field(None, ge=0)
    account_manager: Optional[str] = Field(None, max_length=100)


class SMERelationshipCreate(SMERelationshipBase):
    pass


class SMERelationshipUpdate(SMERelationshipBase):
    pass


class SMERelationshipRead(SMERelationshipBase):
    id: str
    partner_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
