# crm/domains/shared/__init__.py

"""
'shared' domain package: public application information for clients.
"""

__title__ = "CRM Shared Domain"
__all__ = []
