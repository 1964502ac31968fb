"""
Backtest configuration and results models.
"""

from dataclasses import dataclass, field
from datetime import datetime

from markov_trader.core.constants import MAX_TRADE_FRACTION
from markov_trader.core.enums import BacktestStatus, Timeframe, TradeOutcome, TradeSizeMode
from markov_trader.core.exceptions.trading import ConfigurationError
from markov_trader.core.types.financial import ZERO, safe_divide

from .trade import Trade


@dataclass
class BacktestParameters:
    """Configuration for a backtest execution.

    ``commission_percentage`` and ``slippage_percentage`` are fractions of
    notional (0.001 = 0.1%). With PERCENTAGE_OF_CAPITAL sizing,
    ``trade_size_value`` is a fraction of current capital.
    """

    symbol: str
    timeframe: Timeframe
    start_date: datetime
    end_date: datetime
    initial_capital: float
    trade_size_mode: TradeSizeMode | None = None
    trade_size_value: float = ZERO
    commission_percentage: float = ZERO
    slippage_percentage: float = ZERO

    def is_valid_date_range(self) -> bool:
        """Validate that end_date is after start_date."""
        return self.end_date > self.start_date

    def duration_days(self) -> int:
        """Calculate duration of backtest in days."""
        return (self.end_date - self.start_date).days

    def is_valid_capital(self) -> bool:
        """Validate initial capital is positive."""
        return self.initial_capital > 0

    def is_valid_trade_size(self) -> bool:
        if self.trade_size_mode is None or self.trade_size_value <= 0:
            return False
        if self.trade_size_mode == TradeSizeMode.PERCENTAGE_OF_CAPITAL:
            return self.trade_size_value <= MAX_TRADE_FRACTION
        return True

    @staticmethod
    def is_valid_rate(rate: float) -> bool:
        return 0.0 <= rate < 1.0

    def validate(self) -> None:
        """Check every option before a run starts.

        Raises:
            ConfigurationError: On the first invalid option found
        """
        if not self.symbol or not self.symbol.strip():
            raise ConfigurationError("Backtest symbol must not be empty")
        if not self.is_valid_date_range():
            raise ConfigurationError(
                f"end_date ({self.end_date.isoformat()}) must be after start_date ({self.start_date.isoformat()})"
            )
        if not self.is_valid_capital():
            raise ConfigurationError(f"initial_capital must be positive, got {self.initial_capital}")
        if self.trade_size_mode is None:
            raise ConfigurationError("trade_size_mode must be set")
        if not self.is_valid_trade_size():
            raise ConfigurationError(
                f"Invalid trade_size_value {self.trade_size_value} for mode {self.trade_size_mode.value}"
            )
        if not self.is_valid_rate(self.commission_percentage):
            raise ConfigurationError(
                f"commission_percentage must be in [0, 1), got {self.commission_percentage}"
            )
        if not self.is_valid_rate(self.slippage_percentage):
            raise ConfigurationError(
                f"slippage_percentage must be in [0, 1), got {self.slippage_percentage}"
            )

    def to_dict(self) -> dict:
        """Convert parameters to dictionary."""
        return {
            "symbol": self.symbol,
            "timeframe": self.timeframe.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "initial_capital": self.initial_capital,
            "trade_size_mode": self.trade_size_mode.value if self.trade_size_mode else None,
            "trade_size_value": self.trade_size_value,
            "commission_percentage": self.commission_percentage,
            "slippage_percentage": self.slippage_percentage,
        }


@dataclass
class HeldAsset:
    """Quantity bought under the hold strategy and kept outside trading capital."""

    symbol: str
    quantity: float
    entry_price: float
    amount: float
    timestamp: datetime

    def value_at(self, price: float) -> float:
        return self.quantity * price


@dataclass
class BacktestResult:
    """Results from a backtest execution."""

    starting_capital: float
    final_capital: float = ZERO
    realized_pnl: float = ZERO
    win_count: int = 0
    loss_count: int = 0
    hold_count: int = 0
    trade_history: list[Trade] = field(default_factory=list)
    held_assets: list[HeldAsset] = field(default_factory=list)
    final_held_assets_value: float = ZERO
    total_commission: float = ZERO
    status: BacktestStatus = BacktestStatus.COMPLETED
    error_message: str | None = None

    @classmethod
    def failed(cls, starting_capital: float, error_message: str) -> "BacktestResult":
        """Result of a run that could not complete; capital is untouched."""
        return cls(
            starting_capital=starting_capital,
            final_capital=starting_capital,
            status=BacktestStatus.FAILED,
            error_message=error_message,
        )

    @property
    def total_pnl(self) -> float:
        """Change across trading capital and held assets."""
        return self.final_capital + self.final_held_assets_value - self.starting_capital

    @property
    def total_return(self) -> float:
        """Total PnL as a fraction of starting capital."""
        return safe_divide(self.total_pnl, self.starting_capital)

    @property
    def closed_trades(self) -> list[Trade]:
        return [t for t in self.trade_history if t.outcome != TradeOutcome.MOVED_TO_HOLD]

    @property
    def win_rate(self) -> float:
        return safe_divide(self.win_count, self.win_count + self.loss_count)

    def is_profitable(self) -> bool:
        """Check if the backtest was profitable."""
        return self.total_pnl > 0.0

    def to_dict(self) -> dict:
        """Convert results to dictionary."""
        return {
            "status": self.status.value,
            "error_message": self.error_message,
            "starting_capital": self.starting_capital,
            "final_capital": self.final_capital,
            "realized_pnl": self.realized_pnl,
            "total_pnl": self.total_pnl,
            "total_return": self.total_return,
            "win_count": self.win_count,
            "loss_count": self.loss_count,
            "hold_count": self.hold_count,
            "total_commission": self.total_commission,
            "final_held_assets_value": self.final_held_assets_value,
            "held_assets": [
                {
                    "symbol": asset.symbol,
                    "quantity": asset.quantity,
                    "entry_price": asset.entry_price,
                    "amount": asset.amount,
                    "timestamp": asset.timestamp.isoformat(),
                }
                for asset in self.held_assets
            ],
            "trades": [trade.to_dict() for trade in self.trade_history],
        }
