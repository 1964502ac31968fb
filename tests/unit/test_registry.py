"""
Unit tests for the strategy and filter registry.
"""

from unittest.mock import Mock, patch

import pytest

from markov_trader.core.exceptions.trading import ConfigurationError
from markov_trader.filters import EmergencyStopFilter, TakeProfitStopLossFilter
from markov_trader.strategies import MeanReversionStrategy, SmaCrossoverStrategy, StrategyRegistry


@pytest.fixture
def registry() -> StrategyRegistry:
    return StrategyRegistry()


class TestAvailableComponents:
    """Test suite for registry listings."""

    def test_should_list_strategies_with_defaults(self, registry: StrategyRegistry) -> None:
        assert registry.available_strategies() == {
            "SmaCrossover": {"fast_period": 12, "slow_period": 26},
            "MeanReversion": {"consecutive_movements": 3},
        }

    def test_should_list_filters_with_parameter_keys(self, registry: StrategyRegistry) -> None:
        filters = registry.available_filters()
        assert set(filters) == {
            "TrendFilter",
            "RsiFilter",
            "VolumeFilter",
            "AtrTargetsFilter",
            "TakeProfitStopLossFilter",
            "EmergencyStopFilter",
        }
        assert filters["RsiFilter"] == {
            "rsi_period": 14,
            "overbought_threshold": 70.0,
            "oversold_threshold": 30.0,
        }
        assert filters["EmergencyStopFilter"] == {}


class TestCreateFilter:
    """Test suite for filter construction."""

    def test_should_coerce_string_parameters(self, registry: StrategyRegistry) -> None:
        signal_filter = registry.create_filter(
            "TakeProfitStopLossFilter",
            {
                "take_profit_percentage": "0.2",
                "stop_loss_percentage": "0.1",
                "use_hold_strategy_for_longs": "true",
            },
        )
        assert isinstance(signal_filter, TakeProfitStopLossFilter)
        assert signal_filter.take_profit_percentage == 0.2
        assert signal_filter.use_hold_strategy_for_longs is True

    def test_should_require_every_filter_parameter(self, registry: StrategyRegistry) -> None:
        with pytest.raises(ConfigurationError, match="Missing required parameters for VolumeFilter"):
            registry.create_filter("VolumeFilter", {"volume_ma_period": 20})

    def test_should_build_parameterless_filter(self, registry: StrategyRegistry) -> None:
        assert isinstance(registry.create_filter("EmergencyStopFilter"), EmergencyStopFilter)

    def test_should_reject_unknown_filter(self, registry: StrategyRegistry) -> None:
        with pytest.raises(ConfigurationError, match="Unknown filter: MacdFilter"):
            registry.create_filter("MacdFilter", {})

    def test_should_reject_badly_typed_values(self, registry: StrategyRegistry) -> None:
        with pytest.raises(ConfigurationError, match="Invalid value 'abc' for parameter 'long_term_ma_period'"):
            registry.create_filter("TrendFilter", {"long_term_ma_period": "abc"})

    @patch("markov_trader.strategies.registry.logger")
    def test_should_warn_about_unknown_parameters(self, mock_logger: Mock, registry: StrategyRegistry) -> None:
        registry.create_filter("TrendFilter", {"long_term_ma_period": 50, "colour": "red"})
        mock_logger.warning.assert_called_once()
        assert "colour" in mock_logger.warning.call_args[0][0]


class TestCreateStrategy:
    """Test suite for strategy construction."""

    def test_should_fill_missing_strategy_parameters_with_defaults(self, registry: StrategyRegistry) -> None:
        strategy = registry.create_strategy("SmaCrossover", parameters={"fast_period": "5"})
        assert isinstance(strategy, SmaCrossoverStrategy)
        assert (strategy.fast_period, strategy.slow_period) == (5, 26)

    def test_should_register_filters_in_order(self, registry: StrategyRegistry) -> None:
        strategy = registry.create_strategy(
            "MeanReversion",
            [
                ("TrendFilter", {"long_term_ma_period": 50}),
                ("EmergencyStopFilter", None),
            ],
            {"consecutive_movements": 4},
        )
        assert isinstance(strategy, MeanReversionStrategy)
        assert strategy.consecutive_movements == 4
        assert [f.name for f in strategy.filters] == ["TrendFilter(50)", "EmergencyStop"]

    def test_should_reject_unknown_strategy(self, registry: StrategyRegistry) -> None:
        with pytest.raises(ConfigurationError, match="Unknown strategy: Momentum"):
            registry.create_strategy("Momentum")

    def test_should_fail_when_a_filter_cannot_be_built(self, registry: StrategyRegistry) -> None:
        with pytest.raises(ConfigurationError):
            registry.create_strategy("SmaCrossover", [("TrendFilter", {})])
