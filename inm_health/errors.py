"""Errors raised by the health check.

Every failure is terminal for the current run. Counter rescaling is not an
error and never surfaces here.
"""

from __future__ import annotations


class HealthCheckError(Exception):
    """Base class for all health check failures."""


class ConfigurationError(HealthCheckError, ValueError):
    """Raised when the check is configured with values outside their range."""


class ResourceError(HealthCheckError, MemoryError):
    """Raised when the context count tables cannot be allocated."""


class SourceIOError(HealthCheckError, OSError):
    """Raised when a byte source cannot be opened or read."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class EstimatorStateError(HealthCheckError, RuntimeError):
    """Raised when bits are fed to a finalized or released check."""
