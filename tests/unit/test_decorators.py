"""
Unit tests for the trade logging decorator.
"""
# ruff: noqa: ARG001

from unittest.mock import Mock, patch

import pytest

from markov_trader.core.enums import OrderSide, OrderStatus
from markov_trader.core.exceptions.trading import OrderError
from markov_trader.core.models.order import Order
from markov_trader.core.utils.decorators import log_trades


class TestLogTradesDecorator:
    """Test suite for @log_trades decorator."""

    @patch("loguru.logger")
    def test_should_log_function_entry_and_success(self, mock_logger: Mock) -> None:
        """Test that decorator logs function entry and successful completion."""

        @log_trades
        def test_function(symbol: str, amount: float) -> bool:
            return True

        result = test_function("BTCUSDT", 1.5)

        assert result is True
        assert mock_logger.info.call_count == 1
        assert mock_logger.success.call_count == 1

        entry_call = mock_logger.info.call_args
        assert "Trading operation started: test_function" in entry_call[0][0]
        entry_context = entry_call[1]["extra"]
        assert "correlation_id" in entry_context
        assert entry_context["symbol"] == "BTCUSDT"
        assert entry_context["amount"] == 1.5

        success_context = mock_logger.success.call_args[1]["extra"]
        assert success_context["success"] is True
        assert "execution_time_ms" in success_context
        assert success_context["result"] is True

    @patch("loguru.logger")
    def test_should_log_errors_and_reraise(self, mock_logger: Mock) -> None:
        """Test that failures are logged with error details and re-raised."""

        @log_trades
        def test_function(symbol: str) -> None:
            raise OrderError("exchange refused")

        with pytest.raises(OrderError, match="exchange refused"):
            test_function("ETHUSDT")

        assert mock_logger.error.call_count == 1
        assert mock_logger.success.call_count == 0
        error_context = mock_logger.error.call_args[1]["extra"]
        assert error_context["success"] is False
        assert error_context["error_type"] == "OrderError"
        assert error_context["error_message"] == "exchange refused"

    @patch("loguru.logger")
    def test_should_serialize_enum_arguments(self, mock_logger: Mock) -> None:

        @log_trades
        def test_function(symbol: str, side: OrderSide) -> str:
            return "ok"

        test_function("BTCUSDT", OrderSide.SELL)

        entry_context = mock_logger.info.call_args[1]["extra"]
        assert entry_context["side"] == "Sell"
        assert mock_logger.success.call_args[1]["extra"]["result"] == "ok"

    @pytest.mark.asyncio
    @patch("loguru.logger")
    async def test_should_wrap_coroutines(self, mock_logger: Mock) -> None:
        """Test that async functions are awaited and logged with the order context."""

        @log_trades
        async def submit(order: Order) -> Order:
            order.status = OrderStatus.FILLED
            return order

        order = Order(symbol="BTCUSDT", side=OrderSide.BUY, quantity=0.5, price=20000.0)
        result = await submit(order)

        assert result is order
        entry_context = mock_logger.info.call_args[1]["extra"]
        assert entry_context["symbol"] == "BTCUSDT"
        assert entry_context["side"] == "Buy"
        assert entry_context["quantity"] == 0.5
        assert entry_context["price"] == 20000.0
        assert mock_logger.success.call_args[1]["extra"]["result"] == "Filled"

    @pytest.mark.asyncio
    @patch("loguru.logger")
    async def test_should_log_coroutine_failures(self, mock_logger: Mock) -> None:

        @log_trades
        async def submit(order: Order) -> Order:
            raise ConnectionError("timeout")

        with pytest.raises(ConnectionError):
            await submit(Order(symbol="BTCUSDT", side=OrderSide.BUY, quantity=1.0, price=1.0))

        assert mock_logger.error.call_args[1]["extra"]["error_type"] == "ConnectionError"

    def test_should_preserve_function_metadata(self) -> None:

        @log_trades
        async def submit_order(order: Order) -> Order:
            """Submit an order."""
            return order

        assert submit_order.__name__ == "submit_order"
        assert submit_order.__doc__ == "Submit an order."
