"""
Bluzelle client error taxonomy.

Every failure of a submitted transaction reaches the caller of
``Client.submit`` as one of these exceptions.
"""

from __future__ import annotations


class BluzelleError(Exception):
    pass


class TransportError(BluzelleError):
    """Network or HTTP-level failure. Not retried."""


class DecodeError(BluzelleError):
    """Malformed or unexpectedly shaped JSON from the ledger."""


class RemoteError(BluzelleError):
    """The ledger reported an error; ``message`` is its text verbatim."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConflictError(RemoteError):
    """Sequence / signature mismatch. Retried with an account resync."""


class RetryExhaustedError(BluzelleError):
    def __init__(self, attempts: int, last_message: str = "") -> None:
        super().__init__(f"txn failed after max retry attempts ({attempts})")
        self.attempts = attempts
        self.last_message = last_message


class ConfigError(BluzelleError):
    pass


class SigningError(BluzelleError):
    pass


class InvalidArgumentError(BluzelleError, ValueError):
    pass


class PipelineError(BluzelleError, RuntimeError):
    """Internal invariant violation in the transaction pipeline."""


__all__ = [
    "BluzelleError",
    "ConfigError",
    "ConflictError",
    "DecodeError",
    "InvalidArgumentError",
    "PipelineError",
    "RemoteError",
    "RetryExhaustedError",
    "SigningError",
    "TransportError",
]
