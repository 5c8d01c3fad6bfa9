# crm/domains/tag/models.py

"""
Database ORM models of the 'tag' domain.

Tags are free labels (unique name, display color) assigned to partners
through the partner_tags link table.
"""

from typing import Optional
from datetime import datetime, UTC

from sqlmodel import Field, Relationship, SQLModel, Column, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from crm.domains.prt.models import new_uuid


# =============================================================================
# 1. tags
# =============================================================================
class TagBase(SQLModel):
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    tag_name: str = Field(max_length=100, unique=True, nullable=False, description="Tag name")
    color_hex: Optional[str] = Field(default=None, max_length=7, description="Display color, e.g. #1E90FF")
    description: Optional[str] = Field(default=None)

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now())
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())
    )


class Tag(TagBase, table=True):
    __tablename__ = "tags"


# =============================================================================
# 2. partner_tags (partner <-> tag link with metadata)
# =============================================================================
class PartnerTagBase(SQLModel):
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    partner_id: str = Field(foreign_key="partners.id", index=True, nullable=False, max_length=36)
    tag_id: str = Field(foreign_key="tags.id", index=True, nullable=False, max_length=36)
    tagged_by: Optional[str] = Field(default=None, max_length=255)

    tagged_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="Time the tag was assigned"
    )


class PartnerTag(PartnerTagBase, table=True):
    __tablename__ = "partner_tags"
    __table_args__ = (UniqueConstraint("partner_id", "tag_id", name="uq_partner_tag"),)

    tag: Optional[Tag] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
