# crm/domains/__init__.py

"""
Business domains of the Partner CRM API.

One subpackage per domain, each with models / schemas / crud / routers:
- `prt`: partners (natural persons and legal entities), search and export.
- `adr`: addresses and the partner address links.
- `cnt`: contact details of partners.
- `tag`: tags and partner tag assignments.
- `rel`: relationship types, partner relationships, SME relationships.
- `shared`: public, unauthenticated application information.
"""

__all__ = []
