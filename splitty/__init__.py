"""
Splitty - Financial Computation Core

The number-crunching half of a shared expense-splitting app:
personal shares, monthly spend, budget rollover, category ranking
and friend balances.

DESIGN PRINCIPLES:
1. Every computation is a pure function of its inputs
2. Configuration is passed in, never read from a global store
3. Display code never crashes on stale references
4. Balances are recomputed from history, caches are reconciled
5. Settlements are the only mutation, and they are audited
"""

__version__ = "1.0.0"
__author__ = "Splitty Team"
