"""Exception types raised by the report pipeline."""

from __future__ import annotations


class OryxError(Exception):
    """Base class for every failure that aborts a report run.

    The strategy address and pipeline step are attached by the metric
    deriver so the top-level handler can log where the run failed.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.strategy_address: str | None = None
        self.step: str | None = None

    def attach_context(self, strategy_address: str, step: str) -> None:
        """Record which strategy and step raised this error."""
        self.strategy_address = strategy_address
        self.step = step

    def __str__(self) -> str:
        if self.strategy_address is None:
            return self.message
        return f"{self.message} (strategy={self.strategy_address}, step={self.step})"


class ChainCallError(OryxError):
    """Raised when a contract read fails or returns malformed data."""


class AmountOverflowError(OryxError, OverflowError):
    """Raised when a raw token amount does not fit in 128 bits."""


class ZeroLiabilitiesError(OryxError, ZeroDivisionError):
    """Raised when a pool reports zero liabilities."""


class ConfigurationError(OryxError, ValueError):
    """Raised when a required setting or credential is missing."""


class PublishError(OryxError):
    """Raised when the report could not be delivered."""
