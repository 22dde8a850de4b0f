"""
inm-health: an online entropy health check for hardware RNGs.

Predicts each bit of a raw stream from the N bits before it and counts the
self-information of what was actually observed. A collapse of the estimated
entropy per bit flags a failing noise source.
"""

__version__ = "0.1.0"

from inm_health.config import HealthCheckConfig
from inm_health.driver import HealthCheck, HealthReport, State, analyze
from inm_health.errors import (
    ConfigurationError,
    EstimatorStateError,
    HealthCheckError,
    ResourceError,
    SourceIOError,
)
from inm_health.sources import (
    ByteSource,
    BytesSource,
    FileByteSource,
    IterByteSource,
    StreamByteSource,
    open_source,
)

__all__ = [
    "ByteSource",
    "BytesSource",
    "ConfigurationError",
    "EstimatorStateError",
    "FileByteSource",
    "HealthCheck",
    "HealthCheckConfig",
    "HealthCheckError",
    "HealthReport",
    "IterByteSource",
    "ResourceError",
    "SourceIOError",
    "State",
    "StreamByteSource",
    "analyze",
    "open_source",
    "__version__",
]
