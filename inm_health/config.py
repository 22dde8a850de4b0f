"""Tunable constants of the health check."""

from __future__ import annotations

import operator
from dataclasses import dataclass, replace

from inm_health.errors import ConfigurationError

MIN_N = 1
MAX_N = 30
DEFAULT_N = 16

MAX_COUNT = 1 << 14  # per-context count ceiling
MAX_SAMPLES = 80_000  # ceiling for sampled bits and bias counters
WARMUP_BITS = 100  # bias counters start after this many sampled bits
REPORT_INTERVAL = 1 << 20  # bits between diagnostics


def _as_int(name: str, value) -> int:
    """Return *value* as a plain int; numpy integers are accepted, bools and floats are not."""
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    try:
        return operator.index(value)
    except TypeError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class HealthCheckConfig:
    """Configuration for one analysis run.

    ``n`` is the number of previous bits used to predict the next one. It
    should be large enough that the source output is uncorrelated with bits
    ``n`` samples back in time.
    """

    n: int
    max_count: int = MAX_COUNT
    max_samples: int = MAX_SAMPLES
    warmup_bits: int = WARMUP_BITS
    report_interval: int = REPORT_INTERVAL
    debug: bool = False

    def validate(self) -> HealthCheckConfig:
        """Check every field and return a copy holding plain ints."""
        n = _as_int("N", self.n)
        if not MIN_N <= n <= MAX_N:
            raise ConfigurationError(f"N must be from {MIN_N} to {MAX_N}, got {n}")
        values = {"n": n}
        for name, low in (("max_count", 1), ("max_samples", 2), ("report_interval", 1), ("warmup_bits", 0)):
            value = _as_int(name, getattr(self, name))
            if value < low:
                raise ConfigurationError(f"{name} must be an integer >= {low}, got {value!r}")
            values[name] = value
        if values["max_count"] >= 1 << 32:
            raise ConfigurationError(f"max_count must fit in 32 bits, got {values['max_count']}")
        return replace(self, **values)
