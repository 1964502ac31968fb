"""
Technical indicator engine over candle series.
"""

from .technical_indicators import (
    AtrIndicator,
    IndicatorProvider,
    IndicatorStrategy,
    RsiIndicator,
    SmaIndicator,
    VolumeSmaIndicator,
    create_indicator,
)

__all__ = [
    "AtrIndicator",
    "IndicatorProvider",
    "IndicatorStrategy",
    "RsiIndicator",
    "SmaIndicator",
    "VolumeSmaIndicator",
    "create_indicator",
]
