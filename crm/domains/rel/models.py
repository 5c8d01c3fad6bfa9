# crm/domains/rel/models.py

"""
Database ORM models of the 'rel' domain (relationships between partners).

- relationship_types: catalogue of typed edges (e.g. "Employee of").
- partner_relationships: typed, dated edge between two partners.
- sme_relationships: commercial relationship of the company with a partner
  (customer/supplier status, payment terms, credit limit, account manager).
"""

from decimal import Decimal
from typing import Optional
from datetime import date, datetime, UTC

from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import Numeric
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from crm.domains.prt.models import Partner, new_uuid


# =============================================================================
# 1. relationship_types
# =============================================================================
class RelationshipTypeBase(SQLModel):
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    type_name: str = Field(max_length=100, unique=True, nullable=False)
    description: Optional[str] = Field(default=None)
    color_hex: Optional[str] = Field(default=None, max_length=7)
    is_active: bool = Field(default=True, nullable=False)

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now())
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())
    )


class RelationshipType(RelationshipTypeBase, table=True):
    __tablename__ = "relationship_types"


# =============================================================================
# 2. partner_relationships
# =============================================================================
class PartnerRelationshipBase(SQLModel):
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    from_partner_id: str = Field(foreign_key="partners.id", index=True, nullable=False, max_length=36)
    to_partner_id: str = Field(foreign_key="partners.id", index=True, nullable=False, max_length=36)
    relationship_type_id: Optional[str] = Field(
        default=None, foreign_key="relationship_types.id", index=True, max_length=36
    )
    effective_from: Optional[date] = Field(default=None)
    effective_to: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None)

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now())
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())
    )


class PartnerRelationship(PartnerRelationshipBase, table=True):
    __tablename__ = "partner_relationships"

    # two foreign keys point at partners, so each relationship names its column
    from_partner: Optional[Partner] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[PartnerRelationship.from_partner_id]", "lazy": "selectin"}
    )
    to_partner: Optional[Partner] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[PartnerRelationship.to_partner_id]", "lazy": "selectin"}
    )
    relationship_type: Optional[RelationshipType] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})


# =============================================================================
# 3. sme_relationships
# =============================================================================
class SMERelationshipBase(SQLModel):
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    partner_id: str = Field(foreign_key="partners.id", index=True, nullable=False, max_length=36)
    relationship_type: Optional[str] = Field(default=None, max_length=50, description="e.g. CUSTOMER, SUPPLIER")
    status: Optional[str] = Field(default=None, max_length=50, description="e.g. ACTIVE, PROSPECT, SUSPENDED")
    relationship_start: Optional[date] = Field(default=None)
    relationship_end: Optional[date] = Field(default=None)
    payment_terms: Optional[str] = Field(default=None, max_length=255)
    credit_limit: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 2)))
    priority_level: Optional[int] = Field(default=None)
    account_manager: Optional[str] = Field(default=None, max_length=100)

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now())
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())
    )


class SMERelationship(SMERelationshipBase, table=True):
    __tablename__ = "sme_relationships"
