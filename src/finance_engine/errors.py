"""
Error types raised by the finance engine.

InvalidInput is recoverable (re-prompt the user). ConfigurationError means the
rate table itself is broken and should stop the process at startup.

Neither subclasses ValueError: pydantic wraps ValueError raised inside a
validator into a ValidationError, and these must reach the caller as-is.
"""


class FinanceEngineError(Exception):
    """Base class for all engine errors."""


class InvalidInput(FinanceEngineError):
    """An argument supplied by the caller lies outside the engine's domain."""


class ConfigurationError(FinanceEngineError):
    """A rate table violates its structural invariants."""
