#!/usr/bin/env python3
"""
Backtest Runner Script

Runs a registered strategy over simulated historical candles and prints the
result as JSON. Candles are cached on disk under the configured cache
directory so repeated runs over the same range skip regeneration.
"""

import argparse
import asyncio
import json
import sys
from datetime import UTC, datetime

from loguru import logger

from markov_trader.core.config import get_settings
from markov_trader.core.constants import DEFAULT_COMMISSION, DEFAULT_SLIPPAGE
from markov_trader.core.enums import Timeframe, TradeSizeMode
from markov_trader.core.exceptions.trading import TradingException
from markov_trader.core.models.backtest import BacktestParameters
from markov_trader.infrastructure.exchanges import CachingExchange, SimulatedExchange
from markov_trader.services import AnalysisService, BacktestService, StrategyService


def setup_logging(debug: bool = False):
    """Configure logging with loguru."""
    logger.remove()

    level = "DEBUG" if debug else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
    )


def parse_date(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=UTC)


def parse_filter(value: str) -> tuple[str, dict[str, str]]:
    """Parse ``Name:key=value,key=value`` into a filter entry."""
    name, _, raw_params = value.partition(":")
    params = {}
    for pair in filter(None, raw_params.split(",")):
        key, _, param_value = pair.partition("=")
        params[key.strip()] = param_value.strip()
    return name.strip(), params


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    exchange = CachingExchange(SimulatedExchange(seed=args.seed), settings.cache_directory)
    strategy_service = StrategyService()
    try:
        strategy_id = strategy_service.create_strategy(
            args.strategy, [parse_filter(f) for f in args.filter]
        )
    except TradingException as e:
        logger.error(f"Invalid strategy configuration: {e}")
        return 2

    parameters = BacktestParameters(
        symbol=args.symbol,
        timeframe=Timeframe.from_string(args.timeframe),
        start_date=parse_date(args.start),
        end_date=parse_date(args.end),
        initial_capital=args.capital,
        trade_size_mode=TradeSizeMode(args.size_mode),
        trade_size_value=args.size,
        commission_percentage=args.commission,
        slippage_percentage=args.slippage,
    )

    result = await BacktestService(exchange, strategy_service).run_backtest(parameters, strategy_id)
    output = result.to_dict()

    if args.reversals:
        candles = await exchange.get_historical_data(
            parameters.symbol, parameters.timeframe, parameters.start_date, parameters.end_date
        )
        output["reversal_analysis"] = AnalysisService().reversal_probability(candles, args.reversals)

    print(json.dumps(output, indent=2, default=str))
    logger.info(f"Cache statistics: {exchange.statistics.get_stats()}")
    return 0 if result.error_message is None else 1


def main():
    parser = argparse.ArgumentParser(
        description="Run a strategy backtest over simulated candles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_backtest.py --strategy SmaCrossover --start 2024-01-01 --end 2024-06-30
  python run_backtest.py --strategy MeanReversion --filter "TakeProfitStopLossFilter:take_profit_percentage=0.1,stop_loss_percentage=0.05,use_hold_strategy_for_longs=false"
        """,
    )

    parser.add_argument("--strategy", default="SmaCrossover", help="Registered strategy name")
    parser.add_argument(
        "--filter",
        action="append",
        default=[],
        help="Filter entry as Name:key=value,... (repeatable, applied in order)",
    )
    parser.add_argument("--symbol", default="BTCUSDT", help="Trading symbol (default: BTCUSDT)")
    parser.add_argument(
        "--timeframe",
        choices=[tf.value for tf in Timeframe],
        default=Timeframe.D1.value,
        help="Candle timeframe (default: 1d)",
    )
    parser.add_argument("--start", required=True, help="Start date, YYYY-MM-DD")
    parser.add_argument("--end", required=True, help="End date, YYYY-MM-DD")
    parser.add_argument("--capital", type=float, default=10000.0, help="Initial capital")
    parser.add_argument(
        "--size-mode",
        choices=[mode.value for mode in TradeSizeMode],
        default=TradeSizeMode.PERCENTAGE_OF_CAPITAL.value,
    )
    parser.add_argument("--size", type=float, default=0.1, help="Trade size value (default: 0.1)")
    parser.add_argument("--commission", type=float, default=DEFAULT_COMMISSION, help="Commission fraction")
    parser.add_argument("--slippage", type=float, default=DEFAULT_SLIPPAGE, help="Slippage fraction")
    parser.add_argument("--seed", type=int, default=12345, help="Simulated exchange seed")
    parser.add_argument(
        "--reversals", type=int, default=0, help="Also report reversal analysis for runs of N bars"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    setup_logging(args.debug)

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
