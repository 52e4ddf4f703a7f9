"""
SimpliFinance - Source Package

A personal finance tracker that records monthly income and expenses,
tracks what has been paid, and carries recurring bills and unpaid
obligations forward into the following month.

DESIGN PRINCIPLES:
1. The entry collection has a single owner (the EntryStore)
2. Replication only ever appends, never edits or deletes
3. Replication is idempotent against collection state
4. Every mutation is persisted and audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "SimpliFinance Team"
