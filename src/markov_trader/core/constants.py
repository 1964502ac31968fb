"""
Core constants and limits.

Defines system-wide defaults and numeric fallbacks shared by the
engines, filters and analytic calculators.
"""

# Trading Limits
MIN_TRADE_CAPITAL = 0.00001  # Capital at or below this cannot open a position (dust)
MAX_TRADE_FRACTION = 1.0  # Percentage sizing is a fraction of capital (1.0 = 100%)

# Fee Constants (fractions of notional)
DEFAULT_COMMISSION = 0.001  # 0.1% taker fee
DEFAULT_SLIPPAGE = 0.0005  # 0.05%

# Live Trading Loop
DEFAULT_LOOKBACK_DAYS = 100  # Initial history window fetched on engine start
DEFAULT_LOOP_INTERVAL_SECONDS = 60
INCREMENTAL_FETCH_OFFSET_SECONDS = 1  # Refetch starts 1s after the last known candle
DEFAULT_QUOTE_ASSET = "USDT"

# Indicators
RSI_MAX = 100.0
INDICATOR_PLACEHOLDER = 0.0
INDICATOR_CACHE_SIZE = 64  # Memoized (indicator, period) pairs per series

# Analytics
UNINFORMATIVE_PROBABILITY = 0.5

# Exchange Cache
DEFAULT_CACHE_DIRECTORY = "cache"
CACHE_FILE_DATE_FORMAT = "%Y%m%d"
