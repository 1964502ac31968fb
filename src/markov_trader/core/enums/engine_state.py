"""
Engine and live session state enumerations.
"""

from enum import StrEnum


class EngineState(StrEnum):
    """Lifecycle state of a live trading engine."""

    STOPPED = "Stopped"
    RUNNING = "Running"


class SessionStatus(StrEnum):
    """Status reported for a live trading session."""

    RUNNING = "Running"
    STOPPED = "Stopped"


class BacktestStatus(StrEnum):
    """Final status of a backtest run."""

    COMPLETED = "completed"
    FAILED = "failed"
