# crm/domains/adr/__init__.py

"""
'adr' domain package: postal addresses and their assignment to partners.
"""

__title__ = "CRM Address Domain"
__all__ = []
