# crm/domains/prt/__init__.py

"""
'prt' domain package: partners (natural persons / legal entities), partner numbers, search and export.
"""

__title__ = "CRM Partner Domain"
__all__ = []
