"""
In-memory registry of configured strategies.
"""

import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from markov_trader.core.exceptions.trading import StrategyNotFoundError
from markov_trader.core.interfaces.strategy import IStrategy
from markov_trader.strategies.registry import FilterEntry, StrategyRegistry


class StrategyService:
    """Creates strategies by name and keeps them addressable by id."""

    def __init__(self, registry: StrategyRegistry | None = None):
        self._registry = registry or StrategyRegistry()
        self._strategies: dict[uuid.UUID, IStrategy] = {}

    def create_strategy(
        self,
        name: str,
        filters: Iterable[FilterEntry] = (),
        parameters: Mapping[str, Any] | None = None,
    ) -> uuid.UUID:
        """Build and register a strategy.

        Raises:
            ConfigurationError: If the strategy or any filter cannot be built
        """
        strategy = self._registry.create_strategy(name, filters, parameters)
        strategy_id = uuid.uuid4()
        self._strategies[strategy_id] = strategy
        logger.info(f"Registered strategy {strategy.name} as {strategy_id}")
        return strategy_id

    def get_strategy(self, strategy_id: uuid.UUID) -> IStrategy:
        if strategy_id not in self._strategies:
            raise StrategyNotFoundError(strategy_id)
        return self._strategies[strategy_id]

    def list_strategies(self) -> dict[uuid.UUID, str]:
        return {strategy_id: s.name for strategy_id, s in self._strategies.items()}

    def available_strategies(self) -> dict[str, dict[str, Any]]:
        return self._registry.available_strategies()

    def available_filters(self) -> dict[str, dict[str, Any]]:
        return self._registry.available_filters()
