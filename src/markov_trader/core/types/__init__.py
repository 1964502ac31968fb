"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    FINANCIAL_DECIMALS,
    ONE,
    ZERO,
    apply_slippage,
    calculate_commission,
    calculate_notional_value,
    calculate_pnl,
    round_amount,
    safe_divide,
)

__all__ = [
    # Utility functions
    "round_amount",
    "apply_slippage",
    "calculate_commission",
    "calculate_notional_value",
    "calculate_pnl",
    "safe_divide",
    # Constants
    "FINANCIAL_DECIMALS",
    "ZERO",
    "ONE",
]
