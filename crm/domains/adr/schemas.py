# crm/domains/adr/schemas.py

"""
API data transfer objects (DTOs) of the 'adr' domain (addresses).
"""

from typing import Optional
from datetime import date, datetime

from pydantic import field_validator, model_validator
from sqlmodel import SQLModel, Field

from .models import AddressType


def check_validity_range(valid_from: Optional[date], valid_to: Optional[date]) -> None:
    if valid_from and valid_to and valid_to < valid_from:
        raise ValueError("valid_to must not be before valid_from")


def normalize_country_code(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if len(value) != 2 or not value.isalpha():
        raise ValueError("country_code must be a two letter ISO code")
    return value.upper()


# =============================================================================
# 1. Address schemas
# =============================================================================
class AddressBase(SQLModel):
    street_line1: Optional[str] = Field(None, max_length=255)
    street_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state_province: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country_code: Optional[str] = Field(None, max_length=2)
    is_verified: bool = False
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None


class AddressCreate(AddressBase):
    @field_validator("country_code")
    @classmethod
    def normalize_country(cls, value: Optional[str]) -> Optional[str]:
        return normalize_country_code(value)

    @model_validator(mode="after")
    def check_validity(self):
        check_validity_range(self.valid_from, self.valid_to)
        return self


class AddressUpdate(SQLModel):
    street_line1: Optional[str] = Field(None, max_length=255)
    street_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state_province: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country_code: Optional[str] = Field(None, max_length=2)
    is_verified: Optional[bool] = None
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None

    @field_validator("country_code")
    @classmethod
    def normalize_country(cls, value: Optional[str]) -> Optional[str]:
        return normalize_country_code(value)

    @model_validator(mode="after")
    def check_validity(self):
        check_validity_range(self.valid_from, self.valid_to)
        return self


class AddressRead(AddressBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CountryRead(SQLModel):
    code: str
    name: str


# =============================================================================
# 2. AddressDetail schemas
# =============================================================================
class AddressDetailBase(SQLModel):
    address_type: AddressType = AddressType.BILLING
    is_primary: bool = False
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None


class AddressDetailCreate(AddressDetailBase):
    @model_validator(mode="after")
    def check_validity(self):
        check_validity_range(self.valid_from, self.valid_to)
        return self


class AddressDetailUpdate(SQLModel):
    address_type: Optional[AddressType] = None
    is_primary: Optional[bool] = None
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None

    @model_validator(mode="after")
    def check_validity(self):
        check_validity_range(self.valid_from, self.valid_to)
        return self


class AddressDetailRead(AddressDetailBase):
    id: str
    partner_id: str
    address_id: str
    address: AddressRead
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
