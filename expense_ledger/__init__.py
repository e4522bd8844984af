"""
Expense Ledger - Source Package

The domain core of a personal/shared expense tracker: expenses split between
people, per-category budgets with running totals, and a single selected
currency.

DESIGN PRINCIPLES:
1. One owner of the state; every change is an explicit operation
2. Derived values are never stale when read
3. Misses are reported, not raised
4. Every change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
