"""
Markov-chain next-movement probability.
"""

from collections.abc import Sequence

from loguru import logger

from markov_trader.core.constants import UNINFORMATIVE_PROBABILITY
from markov_trader.core.enums import Movement
from markov_trader.core.exceptions.trading import ValidationError
from markov_trader.core.models.candle import Candle


class MarkovChainCalculator:
    """Estimates P(next movement = target | the last bars matched ``pattern``)."""

    def calculate_next_movement_probability(
        self,
        candles: Sequence[Candle],
        pattern: Sequence[Movement],
        target: Movement = Movement.UP,
    ) -> float:
        """
        Scan every start index whose pattern window has a following bar.

        Args:
            candles: Candles in timestamp order
            pattern: Movement sequence to match exactly
            target: Movement whose frequency after the pattern is measured

        Returns:
            Followed-by-target / occurrences, or 0.5 when the series is too
            short or the pattern never occurs

        Raises:
            ValidationError: If the pattern is empty
        """
        pattern = list(pattern)
        if not pattern:
            raise ValidationError("Movement pattern must not be empty")

        movements = [c.movement for c in candles]
        if len(movements) < len(pattern) + 1:
            return UNINFORMATIVE_PROBABILITY

        occurrences = 0
        followed_by_target = 0
        for start in range(len(movements) - len(pattern)):
            if movements[start : start + len(pattern)] != pattern:
                continue
            occurrences += 1
            if movements[start + len(pattern)] == target:
                followed_by_target += 1

        if occurrences == 0:
            return UNINFORMATIVE_PROBABILITY

        logger.debug(
            f"Pattern {[m.value for m in pattern]} seen {occurrences} times, "
            f"followed by {target.value} {followed_by_target} times"
        )
        return followed_by_target / occurrences
