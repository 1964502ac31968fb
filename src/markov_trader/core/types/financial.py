"""
Financial helpers for backtesting and live order sizing.

This module uses float arithmetic throughout. Float64 gives ~15-16
significant digits, which is ample for simulated PnL, while keeping
native NumPy/Pandas compatibility for the indicator engine.

All rates (commission, slippage, percentage sizing) are fractions:
0.001 means 0.1%.
"""

from markov_trader.core.enums import OrderSide

# Financial calculation precision (number of decimal places)
FINANCIAL_DECIMALS = 8  # 8 decimal places (crypto standard)

# Common financial values as float constants
ZERO = 0.0
ONE = 1.0


def round_amount(amount: float) -> float:
    """Round amount to appropriate precision for trading."""
    return round(amount, FINANCIAL_DECIMALS)


def apply_slippage(price: float, slippage: float, side: OrderSide) -> float:
    """Adjust a fill price so that slippage always works against the trader.

    Args:
        price: Reference price
        slippage: Slippage rate as a fraction
        side: Side of the fill (BUY pays more, SELL receives less)

    Returns:
        Slipped fill price

    Examples:
        >>> apply_slippage(100.0, 0.01, OrderSide.BUY)
        101.0
        >>> apply_slippage(100.0, 0.01, OrderSide.SELL)
        99.0
    """
    if side == OrderSide.BUY:
        return price * (ONE + slippage)
    return price * (ONE - slippage)


def calculate_commission(notional: float, commission_rate: float) -> float:
    """Commission charged on a fill of the given notional value."""
    return abs(notional) * commission_rate


def calculate_notional_value(quantity: float, price: float) -> float:
    """Notional value of a quantity at a price."""
    return abs(quantity) * price


def calculate_pnl(
    entry_price: float,
    exit_price: float,
    quantity: float,
    side: OrderSide,
) -> float:
    """Gross PnL of a round trip, before commission.

    Args:
        entry_price: Fill price on entry
        exit_price: Fill price on exit
        quantity: Position quantity (absolute value)
        side: Side the position was opened on

    Returns:
        PnL as float
    """
    qty = abs(quantity)
    if side.is_long:
        return (exit_price - entry_price) * qty
    return (entry_price - exit_price) * qty


def safe_divide(numerator: float, denominator: float, default: float = ZERO) -> float:
    """Divide, returning ``default`` when the denominator is zero.

    Examples:
        >>> safe_divide(1.0, 4.0)
        0.25
        >>> safe_divide(1.0, 0.0, default=0.5)
        0.5
    """
    if denominator == ZERO:
        return default
    return numerator / denominator

