# tests/domains/__init__.py

"""
Domain tests: one `test_<domain>_n.py` module per business domain
(prt, adr, cnt, tag, rel).
"""

__all__ = []
