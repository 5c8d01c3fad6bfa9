# crm/domains/cnt/__init__.py

"""
'cnt' domain package: contact details (e-mail, phone, website, ...) of partners.
"""

__title__ = "CRM Contact Domain"
__all__ = []
