"""
Reversal probability after runs of identical movements.
"""

from collections.abc import Sequence

from loguru import logger

from markov_trader.core.constants import UNINFORMATIVE_PROBABILITY
from markov_trader.core.enums import Movement
from markov_trader.core.models.analytics import ReversalEvent, ReversalProbability
from markov_trader.core.models.candle import Candle
from markov_trader.core.types.financial import safe_divide


class ReversalCalculator:
    """
    Measures how often a run of exactly N Up (or Down) bars is followed by
    a bar moving the other way.

    Runs are maximal: a run of N + 1 Up bars is not a run of N. A run that
    ends on the final bar counts as an occurrence with no confirmed reversal.
    """

    def calculate(self, candles: Sequence[Candle], consecutive_movements: int) -> ReversalProbability:
        result = ReversalProbability()
        if consecutive_movements <= 0 or not candles:
            return result

        runs = {Movement.UP: 0, Movement.DOWN: 0}
        events: dict[Movement, list[ReversalEvent]] = {Movement.UP: [], Movement.DOWN: []}

        start = 0
        while start < len(candles):
            movement = candles[start].movement
            end = start
            while end + 1 < len(candles) and candles[end + 1].movement == movement:
                end += 1

            if end - start + 1 == consecutive_movements:
                runs[movement] += 1
                outcome_index = end + 1
                if outcome_index < len(candles):
                    outcome = candles[outcome_index]
                    # A maximal run is always followed by the opposite movement
                    if outcome.movement == movement.opposite():
                        events[movement].append(
                            ReversalEvent(
                                run_movement=movement,
                                timestamp=outcome.timestamp,
                                volume=outcome.volume,
                                trade_count=outcome.trade_count,
                            )
                        )
            start = end + 1

        result.up_runs = runs[Movement.UP]
        result.down_runs = runs[Movement.DOWN]
        result.up_reversals = events[Movement.UP]
        result.down_reversals = events[Movement.DOWN]
        result.up_reversal_percentage = safe_divide(
            len(events[Movement.UP]), runs[Movement.UP], default=UNINFORMATIVE_PROBABILITY
        )
        result.down_reversal_percentage = safe_divide(
            len(events[Movement.DOWN]), runs[Movement.DOWN], default=UNINFORMATIVE_PROBABILITY
        )

        logger.debug(
            f"Reversal analysis (N={consecutive_movements}): "
            f"{result.up_runs} up runs, {result.down_runs} down runs"
        )
        return result
