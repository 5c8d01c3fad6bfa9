# crm/domains/tag/schemas.py

"""
API data transfer objects (DTOs) of the 'tag' domain.
"""

import re
from typing import Optional
from datetime import datetime

from pydantic import field_validator
from sqlmodel import SQLModel, Field

COLOR_HEX_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def check_color_hex(value: Optional[str]) -> Optional[str]:
    """Accepts None or a '#RRGGBB' color."""
    if value is not None and not COLOR_HEX_RE.match(value):
        raise ValueError("color_hex must look like '#RRGGBB'")
    return value


# =============================================================================
# 1. Tag schemas
# =============================================================================
class TagBase(SQLModel):
    tag_name: str = Field(..., min_length=1, max_length=100)
    color_hex: Optional[str] = Field(None, max_length=7)
    description: Optional[str] = None


class TagCreate(TagBase):
    @field_validator("color_hex")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        return check_color_hex(value)


class TagUpdate(SQLModel):
    tag_name: Optional[str] = Field(None, min_length=1, max_length=100)
    color_hex: Optional[str] = Field(None, max_length=7)
    description: Optional[str] = None

    @field_validator("color_hex")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        return check_color_hex(value)


class TagRead(TagBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# =============================================================================
# 2. PartnerTag schemas
# =============================================================================
class PartnerTagRead(SQLModel):
    id: str
    partner_id: str
    tag_id: str
    tagged_at: Optional[datetime] = None
    tagged_by: Optional[str] = None
    tag: TagRead

    class Config:
        from_attributes = True
