"""
Movement analytics facade.
"""

from collections.abc import Sequence

from markov_trader.analytics import MarkovChainCalculator, ReversalCalculator
from markov_trader.core.enums import Movement
from markov_trader.core.models.candle import Candle


class AnalysisService:
    """Runs the analytic calculators and returns plain dictionaries."""

    def __init__(
        self,
        markov_calculator: MarkovChainCalculator | None = None,
        reversal_calculator: ReversalCalculator | None = None,
    ):
        self._markov = markov_calculator or MarkovChainCalculator()
        self._reversal = reversal_calculator or ReversalCalculator()

    def next_movement_probability(
        self,
        candles: Sequence[Candle],
        pattern: Sequence[Movement | str],
        target: Movement | str = Movement.UP,
    ) -> dict:
        movements = [Movement(m) for m in pattern]
        target_movement = Movement(target)
        probability = self._markov.calculate_next_movement_probability(candles, movements, target_movement)
        return {
            "pattern": [m.value for m in movements],
            "target": target_movement.value,
            "probability": probability,
            "candles": len(candles),
        }

    def reversal_probability(self, candles: Sequence[Candle], consecutive_movements: int) -> dict:
        result = self._reversal.calculate(candles, consecutive_movements)
        return {"consecutive_movements": consecutive_movements, **result.to_dict()}
