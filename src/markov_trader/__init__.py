"""
markov-trader: rule-based strategy backtesting and live trading over OHLCV candles.
"""

__version__ = "1.0.0"
