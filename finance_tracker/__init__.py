"""
Finance Tracker - Source Package

Core of a personal finance tracker: a record editor for income and
expense transactions, the list caches it refreshes, and the document
store it persists to.

DESIGN PRINCIPLES:
1. One engine for creating and editing transactions
2. Validate before any store call
3. Exactly one create-or-update per submit
4. Post-commit effects run strictly after the store call
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
