"""
Construction of strategies and filters from flat ``(name, parameters)`` entries.

Filter entries must supply every parameter key the filter declares;
strategy parameters are optional and fall back to their defaults.
Values are coerced with pydantic (``"14"`` becomes ``14`` for an int key).
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from markov_trader.core.exceptions.trading import ConfigurationError
from markov_trader.core.interfaces.strategy import ISignalFilter, IStrategy
from markov_trader.filters import (
    AtrTargetsFilter,
    EmergencyStopFilter,
    RsiFilter,
    TakeProfitStopLossFilter,
    TrendFilter,
    VolumeFilter,
)

from .mean_reversion import MeanReversionStrategy
from .sma_crossover import SmaCrossoverStrategy

type FilterEntry = tuple[str, Mapping[str, Any] | None]


@dataclass(frozen=True)
class ParameterSpec:
    """A named constructor parameter with its type and default value."""

    key: str
    value_type: type
    default: Any

    def coerce(self, value: Any, component: str) -> Any:
        try:
            return TypeAdapter(self.value_type).validate_python(value)
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid value {value!r} for parameter '{self.key}' of {component}: "
                f"expected {self.value_type.__name__}"
            ) from e


@dataclass(frozen=True)
class ComponentSpec[T]:
    """How to build a filter or strategy from a parameter mapping."""

    name: str
    factory: Callable[..., T]
    parameters: tuple[ParameterSpec, ...] = ()

    def defaults(self) -> dict[str, Any]:
        return {p.key: p.default for p in self.parameters}

    def build(self, parameters: Mapping[str, Any] | None, require_all: bool) -> T:
        parameters = dict(parameters or {})
        known = {p.key for p in self.parameters}

        unknown = sorted(set(parameters) - known)
        if unknown:
            logger.warning(f"Ignoring unknown parameters for {self.name}: {', '.join(unknown)}")

        missing = [p.key for p in self.parameters if p.key not in parameters]
        if require_all and missing:
            raise ConfigurationError(
                f"Missing required parameters for {self.name}: {', '.join(missing)}"
            )

        kwargs = {
            p.key: p.coerce(parameters[p.key], self.name) if p.key in parameters else p.default
            for p in self.parameters
        }
        return self.factory(**kwargs)


FILTERS: dict[str, ComponentSpec[ISignalFilter]] = {
    spec.name: spec
    for spec in [
        ComponentSpec(
            "TrendFilter",
            TrendFilter,
            (ParameterSpec("long_term_ma_period", int, 200),),
        ),
        ComponentSpec(
            "RsiFilter",
            RsiFilter,
            (
                ParameterSpec("rsi_period", int, 14),
                ParameterSpec("overbought_threshold", float, 70.0),
                ParameterSpec("oversold_threshold", float, 30.0),
            ),
        ),
        ComponentSpec(
            "VolumeFilter",
            VolumeFilter,
            (
                ParameterSpec("volume_ma_period", int, 20),
                ParameterSpec("min_volume_multiplier", float, 1.5),
            ),
        ),
        ComponentSpec(
            "AtrTargetsFilter",
            AtrTargetsFilter,
            (
                ParameterSpec("atr_period", int, 14),
                ParameterSpec("take_profit_atr_multiplier", float, 2.0),
                ParameterSpec("stop_loss_atr_multiplier", float, 1.5),
            ),
        ),
        ComponentSpec(
            "TakeProfitStopLossFilter",
            TakeProfitStopLossFilter,
            (
                ParameterSpec("take_profit_percentage", float, 0.10),
                ParameterSpec("stop_loss_percentage", float, 0.05),
                ParameterSpec("use_hold_strategy_for_longs", bool, False),
            ),
        ),
        ComponentSpec("EmergencyStopFilter", EmergencyStopFilter),
    ]
}

STRATEGIES: dict[str, ComponentSpec[IStrategy]] = {
    spec.name: spec
    for spec in [
        ComponentSpec(
            "SmaCrossover",
            SmaCrossoverStrategy,
            (
                ParameterSpec("fast_period", int, 12),
                ParameterSpec("slow_period", int, 26),
            ),
        ),
        ComponentSpec(
            "MeanReversion",
            MeanReversionStrategy,
            (ParameterSpec("consecutive_movements", int, 3),),
        ),
    ]
}


class StrategyRegistry:
    """Builds strategies and filters by name."""

    def __init__(
        self,
        strategies: Mapping[str, ComponentSpec[IStrategy]] | None = None,
        filters: Mapping[str, ComponentSpec[ISignalFilter]] | None = None,
    ):
        self._strategies = dict(STRATEGIES if strategies is None else strategies)
        self._filters = dict(FILTERS if filters is None else filters)

    def available_strategies(self) -> dict[str, dict[str, Any]]:
        """Strategy names with their parameter defaults."""
        return {name: spec.defaults() for name, spec in self._strategies.items()}

    def available_filters(self) -> dict[str, dict[str, Any]]:
        """Filter names with their required parameter keys and suggested values."""
        return {name: spec.defaults() for name, spec in self._filters.items()}

    def create_filter(self, name: str, parameters: Mapping[str, Any] | None = None) -> ISignalFilter:
        """
        Build a filter from its registry name.

        Raises:
            ConfigurationError: If the name is unknown, a parameter is missing
                or a value has the wrong type
        """
        if name not in self._filters:
            raise ConfigurationError(
                f"Unknown filter: {name}. Available filters: {', '.join(self._filters)}"
            )
        return self._filters[name].build(parameters, require_all=True)

    def create_strategy(
        self,
        name: str,
        filters: Iterable[FilterEntry] = (),
        parameters: Mapping[str, Any] | None = None,
    ) -> IStrategy:
        """
        Build a strategy and register its filters in the given order.

        Raises:
            ConfigurationError: If the strategy or a filter cannot be built
        """
        if name not in self._strategies:
            raise ConfigurationError(
                f"Unknown strategy: {name}. Available strategies: {', '.join(self._strategies)}"
            )

        built_filters = [self.create_filter(f_name, f_params) for f_name, f_params in filters]
        strategy = self._strategies[name].build(parameters, require_all=False)
        for signal_filter in built_filters:
            strategy.add_filter(signal_filter)

        logger.info(f"Created strategy {strategy.name} with {len(strategy.filters)} filters")
        return strategy
