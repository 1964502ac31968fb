"""
Signal filters applied, in registration order, to a strategy's raw signals.
"""

from .atr_targets import AtrTargetsFilter
from .base import BarContextFilter
from .emergency_stop import EmergencyStopFilter
from .rsi import RsiFilter
from .take_profit_stop_loss import TakeProfitStopLossFilter
from .trend import TrendFilter
from .volume import VolumeFilter

__all__ = [
    "AtrTargetsFilter",
    "BarContextFilter",
    "EmergencyStopFilter",
    "RsiFilter",
    "TakeProfitStopLossFilter",
    "TrendFilter",
    "VolumeFilter",
]
