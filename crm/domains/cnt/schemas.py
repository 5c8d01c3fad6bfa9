# crm/domains/cnt/schemas.py

"""
API data transfer objects (DTOs) of the 'cnt' domain (contact details).
"""

from typing import Optional
from datetime import datetime

from pydantic import EmailStr, TypeAdapter, ValidationError, field_validator, model_validator
from sqlmodel import SQLModel, Field

_email_adapter = TypeAdapter(EmailStr)


def normalize_contact_type(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip().upper()
    return value or None


def check_contact_value(contact_type: Optional[str], contact_value: Optional[str]) -> None:
    """E-mail contacts have to hold a valid address."""
    if contact_type == "EMAIL" and contact_value is not None:
        try:
            _email_adapter.validate_python(contact_value)
        except ValidationError:
            raise ValueError("contact_value must be a valid e-mail address")


# =============================================================================
# 1. ContactDetail schemas
# =============================================================================
class ContactDetailBase(SQLModel):
    contact_type: Optional[str] = Field(None, max_length=50)
    contact_value: str = Field(..., min_length=1, max_length=255)
    label: Optional[str] = Field(None, max_length=100)
    is_primary: bool = False
    is_verified: bool = False


class ContactDetailCreate(ContactDetailBase):
    @field_validator("contact_type")
    @classmethod
    def normalize_type(cls, value: Optional[str]) -> Optional[str]:
        return normalize_contact_type(value)

    @model_validator(mode="after")
    def check_value(self):
        check_contact_value(self.contact_type, self.contact_value)
        return self


class ContactDetailUpdate(SQLModel):
    contact_type: Optional[str] = Field(None, max_length=50)
    contact_value: Optional[str] = Field(None, min_length=1, max_length=255)
    label: Optional[str] = Field(None, max_length=100)
    is_primary: Optional[bool] = None
    is_verified: Optional[bool] = None

    @field_validator("contact_type")
    @classmethod
    def normalize_type(cls, value: Optional[str]) -> Optional[str]:
        return normalize_contact_type(value)


class ContactDetailRead(ContactDetailBase):
    id: str
    partner_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
