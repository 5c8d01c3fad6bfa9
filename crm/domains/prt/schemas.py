# crm/domains/prt/schemas.py

"""
API data transfer objects (DTOs) of the 'prt' domain (partners).
Response schemas follow the '...Read' naming used by every domain.
"""

from typing import Optional, List, Literal, Union, Annotated
from datetime import date, datetime

from pydantic import Field as PydanticField
from sqlmodel import SQLModel, Field

from crm.domains.prt.models import PartnerType, Partner, format_partner_number
from crm.domains.tag.schemas import TagRead

NATURAL_PERSON_FIELDS = (
    "first_name", "last_name", "middle_name", "title", "date_of_birth", "preferred_language",
)
LEGAL_ENTITY_FIELDS = (
    "legal_name", "trading_name", "registration_number", "legal_form", "incorporation_date", "jurisdiction",
)


# =============================================================================
# 1. Partner write schemas
# =============================================================================
class PartnerWriteBase(SQLModel):
    """
    Body of partner create/update requests.
    The partner kind is taken from `partner_type` when given, otherwise inferred
    from the name fields (see `resolve_partner_type`).
    """
    partner_type: Optional[PartnerType] = None
    notes: Optional[str] = None
    tax_id: Optional[str] = Field(None, max_length=100)

    # --- natural person ---
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    middle_name: Optional[str] = Field(None, max_length=255)
    title: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date] = None
    preferred_language: Optional[str] = Field(None, max_length=10)

    # --- legal entity ---
    legal_name: Optional[str] = Field(None, max_length=255)
    trading_name: Optional[str] = Field(None, max_length=255)
    registration_number: Optional[str] = Field(None, max_length=100)
    legal_form: Optional[str] = Field(None, max_length=100)
    incorporation_date: Optional[date] = None
    jurisdiction: Optional[str] = Field(None, max_length=100)

    def resolve_partner_type(self) -> Optional[PartnerType]:
        """first_name/last_name -> natural person, legal_name -> legal entity."""
        if self.partner_type is not None:
            return self.partner_type
        if self.first_name is not None or self.last_name is not None:
            return PartnerType.NATURAL_PERSON
        if self.legal_name is not None:
            return PartnerType.LEGAL_ENTITY
        return None


class PartnerCreate(PartnerWriteBase):
    pass


class PartnerUpdate(PartnerWriteBase):
    is_active: Optional[bool] = None


# =============================================================================
# 2. Partner read schemas (one per partner kind)
# =============================================================================
class PartnerReadBase(SQLModel):
    id: str
    partner_number: str
    is_active: bool
    notes: Optional[str] = None
    tax_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NaturalPersonRead(PartnerReadBase):
    partner_type: Literal[PartnerType.NATURAL_PERSON] = PartnerType.NATURAL_PERSON
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    middle_name: Optional[str] = None
    title: Optional[str] = None
    date_of_birth: Optional[date] = None
    preferred_language: Optional[str] = None


class LegalEntityRead(PartnerReadBase):
    partner_type: Literal[PartnerType.LEGAL_ENTITY] = PartnerType.LEGAL_ENTITY
    legal_name: Optional[str] = None
    trading_name: Optional[str] = None
    registration_number: Optional[str] = None
    legal_form: Optional[str] = None
    incorporation_date: Optional[date] = None
    jurisdiction: Optional[str] = None


PartnerRead = Annotated[
    Union[NaturalPersonRead, LegalEntityRead],
    PydanticField(discriminator="partner_type"),
]


def to_partner_read(partner: Partner) -> Union[NaturalPersonRead, LegalEntityRead]:
    """Maps a partner row onto the read schema of its kind."""
    if partner.partner_type == PartnerType.NATURAL_PERSON:
        return NaturalPersonRead.model_validate(partner)
    return LegalEntityRead.model_validate(partner)


class PartnerSummary(SQLModel):
    """Compact partner reference embedded in relationship responses."""
    id: str
    partner_number: str
    partner_type: PartnerType
    display_name: str

    class Config:
        from_attributes = True


# =============================================================================
# 3. Partner search result
# =============================================================================
class PartnerSearchResult(SQLModel):
    """
    Flat row of the partner overview: partner columns of both kinds plus the
    preferred address line, preferred email/phone/website and the tags.
    """
    id: str
    partner_number: str
    partner_type: PartnerType
    active: bool
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # natural person
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None

    # legal entity
    legal_name: Optional[str] = None
    jurisdiction: Optional[str] = None
    registration_number: Optional[str] = None
    incorporation_date: Optional[date] = None

    address_line: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    tags: List[TagRead] = []

    @classmethod
    def from_partner(cls, partner: Partner, **extra) -> "PartnerSearchResult":
        return cls(
            id=partner.id,
            partner_number=format_partner_number(partner.partner_number_seq),
            partner_type=partner.partner_type,
            active=partner.is_active,
            notes=partner.notes,
            created_at=partner.created_at,
            updated_at=partner.updated_at,
            first_name=partner.first_name,
            last_name=partner.last_name,
            date_of_birth=partner.date_of_birth,
            legal_name=partner.legal_name,
            jurisdiction=partner.jurisdiction,
            registration_number=partner.registration_number,
            incorporation_date=partner.incorporation_date,
            **extra,
        )


# =============================================================================
# 4. Partner export
# =============================================================================
class PartnerExportResult(SQLModel):
    status: str
    exported_count: Optional[int] = None
    path: str
    job_id: Optional[str] = None
