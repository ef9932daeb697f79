"""
Calculators Package

Provides the per-booking calculation components of the settlement engine.
"""

from .balance import BalanceBucket, BalanceClassifier
from .percentage import PercentageResolver
from .split import SettlementCalculator
from .visibility import VisibilityFilter

__all__ = [
    "VisibilityFilter",
    "PercentageResolver",
    "SettlementCalculator",
    "BalanceClassifier",
    "BalanceBucket",
]
