"""
Result models for the analytic calculators.
"""

from dataclasses import dataclass, field
from datetime import datetime

from markov_trader.core.constants import UNINFORMATIVE_PROBABILITY
from markov_trader.core.enums import Movement


@dataclass(frozen=True)
class ReversalEvent:
    """The bar that confirmed a reversal after a run of identical movements."""

    run_movement: Movement
    timestamp: datetime
    volume: float
    trade_count: int

    def to_dict(self) -> dict:
        return {
            "run_movement": self.run_movement.value,
            "timestamp": self.timestamp.isoformat(),
            "volume": self.volume,
            "trade_count": self.trade_count,
        }


@dataclass
class ReversalProbability:
    """Reversal rates after exact runs of N Up bars and N Down bars."""

    up_reversal_percentage: float = UNINFORMATIVE_PROBABILITY
    down_reversal_percentage: float = UNINFORMATIVE_PROBABILITY
    up_runs: int = 0
    down_runs: int = 0
    up_reversals: list[ReversalEvent] = field(default_factory=list)
    down_reversals: list[ReversalEvent] = field(default_factory=list)

    @property
    def up_reversal_dates(self) -> list[datetime]:
        return [e.timestamp for e in self.up_reversals]

    @property
    def down_reversal_dates(self) -> list[datetime]:
        return [e.timestamp for e in self.down_reversals]

    def to_dict(self) -> dict:
        return {
            "up_reversal_percentage": self.up_reversal_percentage,
            "down_reversal_percentage": self.down_reversal_percentage,
            "up_runs": self.up_runs,
            "down_runs": self.down_runs,
            "up_reversals": [e.to_dict() for e in self.up_reversals],
            "down_reversals": [e.to_dict() for e in self.down_reversals],
        }
