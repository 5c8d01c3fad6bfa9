# crm/domains/prt/services.py

"""
Partner services that span several domains:

- the partner overview (search results with preferred address, preferred
  contacts and tags);
- the partner export to a plain text file.
"""

import logging
import aiofiles
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm.domains.adr import models as adr_models
from crm.domains.cnt import models as cnt_models
from crm.domains.tag import models as tag_models
from crm.domains.tag import schemas as tag_schemas
from . import crud as prt_crud
from . import models as prt_models
from . import schemas as prt_schemas

logger = logging.getLogger(__name__)

# contact types consulted for each column of the overview, in order
EMAIL_TYPES = ("EMAIL",)
PHONE_TYPES = ("PHONE", "MOBILE")
WEBSITE_TYPES = ("WEBSITE",)


# =============================================================================
# 1. Preferred address / contact selection
# =============================================================================
def select_preferred_address(
    details: Sequence[adr_models.AddressDetail],
) -> Optional[adr_models.AddressDetail]:
    """
    Picks the address shown for a partner: the primary link, else the first
    billing address, else the first remaining one.
    """
    if not details:
        return None
    for detail in details:
        if detail.is_primary:
            return detail
    for detail in details:
        if detail.address_type == adr_models.AddressType.BILLING:
            return detail
    return details[0]


def select_preferred_contact(
    contacts: Iterable[cnt_models.ContactDetail], contact_types: Sequence[str]
) -> Optional[cnt_models.ContactDetail]:
    """
    Picks the contact shown for the given types: earlier types win over later
    ones; within a type primary beats verified beats alphabetical order.
    """
    contacts = list(contacts)
    for contact_type in contact_types:
        candidates = [c for c in contacts if c.contact_type == contact_type]
        if candidates:
            return min(
                candidates,
                key=lambda c: (not c.is_primary, not c.is_verified, (c.contact_value or "").lower()),
            )
    return None


# =============================================================================
# 2. Partner overview
# =============================================================================
async def _group_by_partner(db: AsyncSession, model, partner_ids: List[str]) -> Dict[str, list]:
    grouped: Dict[str, list] = defaultdict(list)
    if not partner_ids:
        return grouped
    query = (
        select(model)
        .where(model.partner_id.in_(partner_ids))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    for row in result.scalars().all():
        grouped[row.partner_id].append(row)
    return grouped


async def _tags_by_partner(db: AsyncSession, partner_ids: List[str]) -> Dict[str, List[tag_models.Tag]]:
    grouped: Dict[str, List[tag_models.Tag]] = defaultdict(list)
    if not partner_ids:
        return grouped
    query = (
        select(tag_models.PartnerTag.partner_id, tag_models.Tag)
        .join(tag_models.Tag, tag_models.Tag.id == tag_models.PartnerTag.tag_id)
        .where(tag_models.PartnerTag.partner_id.in_(partner_ids))
        .order_by(tag_models.Tag.tag_name)
    )
    result = await db.execute(query)
    for partner_id, tag in result.all():
        grouped[partner_id].append(tag)
    return grouped


async def search_partners(db: AsyncSession, *, term: Optional[str]) -> List[prt_schemas.PartnerSearchResult]:
    """
    Partner overview rows for `term`, ordered by partner number.
    Addresses, contacts and tags are loaded with one query each.
    """
    partners = await prt_crud.partner.search(db, term=term)
    partner_ids = [p.id for p in partners]

    details_by_partner = await _group_by_partner(db, adr_models.AddressDetail, partner_ids)
    contacts_by_partner = await _group_by_partner(db, cnt_models.ContactDetail, partner_ids)
    tags_by_partner = await _tags_by_partner(db, partner_ids)

    results = []
    for partner in partners:
        details = sorted(
            details_by_partner.get(partner.id, []),
            key=lambda d: (not d.is_primary, d.address_type.value, d.created_at is None, d.created_at or 0),
        )
        preferred = select_preferred_address(details)
        contacts = contacts_by_partner.get(partner.id, [])

        email = select_preferred_contact(contacts, EMAIL_TYPES)
        phone = select_preferred_contact(contacts, PHONE_TYPES)
        website = select_preferred_contact(contacts, WEBSITE_TYPES)

        results.append(
            prt_schemas.PartnerSearchResult.from_partner(
                partner,
                address_line=preferred.address.format_line() if preferred and preferred.address else None,
                email=email.contact_value if email else None,
                phone=phone.contact_value if phone else None,
                website=website.contact_value if website else None,
                tags=[tag_schemas.TagRead.model_validate(t) for t in tags_by_partner.get(partner.id, [])],
            )
        )
    logger.debug("Partner search '%s' returned %d row(s)", term or "", len(results))
    return results


# =============================================================================
# 3. Partner export
# =============================================================================
def format_export_line(partner: prt_models.Partner) -> str:
    return f"{partner.partner_number} {partner.display_name}"


async def export_partners(db: AsyncSession, *, path: str) -> int:
    """
    Writes one line per partner ('P00000001 Name'), ordered by partner
    number, to `path`. Parent directories are created and an existing file
    is overwritten. Returns the number of exported partners.
    """
    target = Path(path)
    logger.info("Starting partner export to %s", target)
    try:
        partners = await prt_crud.partner.get_multi(db, limit=None)

        target.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(target, "w", encoding="utf-8") as f:
            for partner in partners:
                await f.write(f"{format_export_line(partner)}\n")
    except Exception:
        logger.error("Partner export to %s failed", target, exc_info=True)
        raise

    logger.info("Exported %d partner(s) to %s", len(partners), target)
    return len(partners)
