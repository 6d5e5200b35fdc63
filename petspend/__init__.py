"""
PetSpend - Source Package

Core of a personal pet-expense tracker: pets, expenses per
category, monthly spending limits, and the breakdowns built
from them.

DESIGN PRINCIPLES:
1. Amounts are exact decimals
2. Derived numbers are recomputed, never stored
3. Every change is persisted immediately, whole state at once
4. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "PetSpend Team"
