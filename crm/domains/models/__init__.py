# crm/domains/models/__init__.py

"""
Central import of the SQLModel table models of every domain.
Importing this package registers all tables on SQLModel.metadata.
"""

# prt (Partner, PartnerSequence)
from crm.domains.prt.models import Partner, PartnerSequence, PartnerType

# adr (Address, AddressDetail)
from crm.domains.adr.models import Address, AddressDetail, AddressType

# cnt (ContactDetail)
from crm.domains.cnt.models import ContactDetail

# tag (Tag, PartnerTag)
from crm.domains.tag.models import Tag, PartnerTag

# rel (RelationshipType, PartnerRelationship, SMERelationship)
from crm.domains.rel.models import RelationshipType, PartnerRelationship, SMERelationship

__all__ = [
    "Partner", "PartnerSequence", "PartnerType",
    "Address", "AddressDetail", "AddressType",
    "ContactDetail",
    "Tag", "PartnerTag",
    "RelationshipType", "PartnerRelationship", "SMERelationship",
]
