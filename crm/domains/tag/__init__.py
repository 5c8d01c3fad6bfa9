# crm/domains/tag/__init__.py

"""
'tag' domain package: tags and the tags assigned to partners.
"""

__title__ = "CRM Tag Domain"
__all__ = []
