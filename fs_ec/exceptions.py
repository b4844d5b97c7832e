"""Exception hierarchy for Evaporative Cooling runs."""

from __future__ import annotations

from typing import Optional


class ECError(Exception):
    """Base exception for all Evaporative Cooling errors."""


class ConfigurationError(ECError, ValueError):
    """Run configuration is invalid; raised before any engine is invoked."""


class EngineFailure(ECError, RuntimeError):
    """A ranking engine could not produce scores for the working set."""

    def __init__(self, message: str, engine: Optional[str] = None) -> None:
        super().__init__(message)
        self.engine = engine


class ConsistencyError(ECError):
    """Score lists or the working set disagree about attribute names."""


class OutputError(ECError, OSError):
    """EC scores could not be written."""
