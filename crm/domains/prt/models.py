# crm/domains/prt/models.py

"""
Database ORM models of the 'prt' domain (partners).

Natural persons and legal entities share the single `partners` table. The
`partner_type` column tells the two kinds apart; columns that only belong to
one kind stay NULL for the other.
"""

import uuid
from enum import Enum
from typing import Optional
from datetime import date, datetime, UTC

from sqlmodel import Field, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

PARTNER_NUMBER_FORMAT = "P{:08d}"


def new_uuid() -> str:
    return str(uuid.uuid4())


def format_partner_number(seq: Optional[int]) -> Optional[str]:
    """Formats a sequence value as a partner number, e.g. 42 -> 'P00000042'."""
    if seq is None:
        return None
    return PARTNER_NUMBER_FORMAT.format(seq)


class PartnerType(str, Enum):
    NATURAL_PERSON = "NATURAL_PERSON"
    LEGAL_ENTITY = "LEGAL_ENTITY"


# =============================================================================
# 1. partner_sequence (partner number generator)
# =============================================================================
class PartnerSequence(SQLModel, table=True):
    """
    Single-row table handing out partner numbers.
    `next_val` is the number the next created partner receives.
    """
    __tablename__ = "partner_sequence"

    id: int = Field(default=1, primary_key=True)
    next_val: int = Field(default=1, nullable=False)


# =============================================================================
# 2. partners
# =============================================================================
class PartnerBase(SQLModel):
    """
    Columns of the partners table, common and per partner kind.
    """
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    partner_number_seq: int = Field(unique=True, nullable=False, index=True)
    partner_type: PartnerType = Field(nullable=False, index=True)
    is_active: bool = Field(default=True, nullable=False)
    notes: Optional[str] = Field(default=None)

    # --- natural person ---
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    middle_name: Optional[str] = Field(default=None, max_length=255)
    title: Optional[str] = Field(default=None, max_length=20)
    date_of_birth: Optional[date] = Field(default=None)
    preferred_language: Optional[str] = Field(default=None, max_length=10)

    # --- legal entity ---
    legal_name: Optional[str] = Field(default=None, max_length=255)
    trading_name: Optional[str] = Field(default=None, max_length=255)
    registration_number: Optional[str] = Field(default=None, max_length=100)
    legal_form: Optional[str] = Field(default=None, max_length=100)
    incorporation_date: Optional[date] = Field(default=None)
    jurisdiction: Optional[str] = Field(default=None, max_length=100)

    # --- shared by both kinds ---
    tax_id: Optional[str] = Field(default=None, max_length=100)

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="Record creation time"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="Record last update time"
    )


class Partner(PartnerBase, table=True):
    """
    ORM class of the partners table.
    """
    __tablename__ = "partners"

    @property
    def partner_number(self) -> Optional[str]:
        return format_partner_number(self.partner_number_seq)

    @property
    def is_natural_person(self) -> bool:
        return self.partner_type == PartnerType.NATURAL_PERSON

    @property
    def is_legal_entity(self) -> bool:
        return self.partner_type == PartnerType.LEGAL_ENTITY

    @property
    def display_name(self) -> str:
        """
        Human readable name: title, first, middle and last name for natural persons,
        trading name or legal name for legal entities.
        """
        if self.is_natural_person:
            parts = [self.title, self.first_name, self.middle_name, self.last_name]
            name = " ".join(p.strip() for p in parts if p and p.strip())
            return name or "Unnamed Natural Person"
        if self.is_legal_entity:
            for candidate in (self.trading_name, self.legal_name):
                if candidate and candidate.strip():
                    return candidate.strip()
            return "Unnamed Legal Entity"
        return "Unknown Partner Type"
