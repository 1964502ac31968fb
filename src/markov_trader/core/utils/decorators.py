"""
Order submission logging.

``log_trades`` wraps a function that places or inspects orders and emits a
started/completed/failed record through loguru. Each record carries a short
correlation id plus the order details found in the call arguments, passed as
``extra`` so sinks can serialize them.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any

ORDER_FIELDS = ("symbol", "side", "quantity", "price")
CONTEXT_ARGUMENTS = frozenset((*ORDER_FIELDS, "amount"))


def _plain(value: Any) -> Any:
    """Enum members are logged by their value."""
    return str(value.value) if hasattr(value, "value") else value


class _TradeLog:
    """Logging state for one decorated call."""

    def __init__(self, func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]):
        self.name = func.__name__
        self.context: dict[str, Any] = {
            "correlation_id": uuid.uuid4().hex[:8],
            "timestamp": str(time.time()),
        }

        bound = inspect.signature(func).bind(*args, **kwargs)
        bound.apply_defaults()
        for key, value in bound.arguments.items():
            if key == "order" and hasattr(value, "symbol"):
                self.context.update({f: _plain(getattr(value, f)) for f in ORDER_FIELDS})
            elif key in CONTEXT_ARGUMENTS:
                self.context[key] = _plain(value)

        self._started = time.perf_counter()

    def _elapsed_ms(self) -> float:
        return round((time.perf_counter() - self._started) * 1000, 2)

    def started(self, logger) -> None:
        logger.info(f"Trading operation started: {self.name}", extra=self.context)

    def completed(self, logger, result: Any) -> None:
        extra = {
            **self.context,
            "success": True,
            "execution_time_ms": self._elapsed_ms(),
            "result_type": type(result).__name__,
        }
        if isinstance(result, bool | int | float | str):
            extra["result"] = result
        elif hasattr(result, "status"):
            extra["result"] = _plain(result.status)
        logger.success(f"Trading operation completed: {self.name}", extra=extra)

    def failed(self, logger, error: Exception) -> None:
        extra = {
            **self.context,
            "success": False,
            "execution_time_ms": self._elapsed_ms(),
            "error_type": type(error).__name__,
            "error_message": str(error),
        }
        logger.error(f"Trading operation failed: {self.name}", extra=extra)


def log_trades[F: Callable[..., Any]](func: F) -> F:
    """Log entry, completion and failure of an order operation.

    Works on both plain and ``async`` functions; failures are logged and re-raised.
    """
    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            from loguru import logger

            log = _TradeLog(func, args, kwargs)
            log.started(logger)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                log.failed(logger, e)
                raise
            log.completed(logger, result)
            return result

        return async_wrapper  # type: ignore

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from loguru import logger

        log = _TradeLog(func, args, kwargs)
        log.started(logger)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            log.failed(logger, e)
            raise
        log.completed(logger, result)
        return result

    return wrapper  # type: ignore
