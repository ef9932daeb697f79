"""
REVENUE-SPLIT SETTLEMENT ENGINE
Splits booking revenue between the agency and its providers.
"""

from .config import AgencyConfig
from .models import Booking, Provider, SettlementResult, Summary
from .palette import assign_colors, color_for
from .processor import (
    SettlementProcessor,
    compute_settlement,
    resolve,
    summarize,
)

__all__ = [
    'SettlementProcessor',
    'AgencyConfig',
    'Booking',
    'Provider',
    'SettlementResult',
    'Summary',
    'resolve',
    'compute_settlement',
    'summarize',
    'color_for',
    'assign_colors',
]
