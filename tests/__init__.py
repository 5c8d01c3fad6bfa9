# tests/__init__.py

"""
Test suite of the Partner CRM API.

- `conftest.py`: database, client and domain fixtures shared by every test.
- `test_main.py`: application level endpoints.
- `domains/`: one test module per business domain.
"""

__title__ = "CRM API Tests"
__all__ = []
