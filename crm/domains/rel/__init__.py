# crm/domains/rel/__init__.py

"""
'rel' domain package: relationship types, relationships between partners and SME relationships.
"""

__title__ = "CRM Relationship Domain"
__all__ = []
