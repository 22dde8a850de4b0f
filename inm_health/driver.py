"""Stream driver: runs a byte source through the health check.

The check assumes the generator is well modelled by a single state variable
updated with noise between bits, so bits close together are more correlated
than bits far apart. Ring oscillators and zener noise sources fit this model
reasonably well. Sources with extra hidden state do not: bits taken from an
ADC carry the position of the bit within each sample as unmodelled state.

Usage::

    with HealthCheck(16) as hc:
        hc.feed(FileByteSource("trng.bin"))
        report = hc.finalize()
    print(report.summary_line())
"""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass, field, replace
from typing import Iterator

import numpy as np

from inm_health.config import HealthCheckConfig
from inm_health.context import BitContextModel
from inm_health.errors import EstimatorStateError
from inm_health.estimator import SequentialEstimator
from inm_health.guard import BiasCounter, OverflowGuard, Rescale
from inm_health.sources import ByteSource, as_byte_array

logger = logging.getLogger(__name__)


class State(enum.Enum):
    READY = "ready"
    RUNNING = "running"
    FINALIZED = "finalized"
    RELEASED = "released"


@dataclass
class HealthReport:
    """Result of one analysis run."""

    n: int
    entropy_per_bit: float
    branching_factor: float
    entropy_bits: int
    bits_sampled: int
    total_bits: int
    ones_percent: float
    rescales: dict[str, int] = field(default_factory=dict)

    def summary_line(self) -> str:
        return (
            f"Estimated entropy per bit: {self.entropy_per_bit:f}, "
            f"estimated K: {self.branching_factor:f}"
        )

    def as_dict(self) -> dict:
        return asdict(self)


class HealthCheck:
    """Adaptive order-N entropy estimator for one bit stream.

    Owns its count tables and counters; a fresh instance is needed for each
    stream. Construction fails with ``ConfigurationError`` for N outside
    1..30 and with ``ResourceError`` when the tables cannot be allocated.
    """

    def __init__(
        self,
        n: int,
        *,
        config: HealthCheckConfig | None = None,
        debug: bool | None = None,
    ) -> None:
        if config is None:
            config = HealthCheckConfig(n=n)
        elif config.n != n:
            config = replace(config, n=n)
        self.config = config = config.validate()
        self.debug = config.debug if debug is None else debug
        self.model = BitContextModel(config.n)
        self.estimator = SequentialEstimator()
        self.bias = BiasCounter()
        self.guard = OverflowGuard(config.max_count, config.max_samples)
        self.total_bits = 0
        self._state = State.READY

    @classmethod
    def from_config(cls, config: HealthCheckConfig) -> HealthCheck:
        return cls(config.n, config=config)

    # ── state ──

    @property
    def n(self) -> int:
        return self.config.n

    @property
    def state(self) -> State:
        return self._state

    @property
    def context(self) -> int:
        return self.model.context

    @property
    def probability(self) -> float:
        return self.estimator.probability

    @property
    def entropy_bits(self) -> int:
        return self.estimator.entropy_bits

    @property
    def bits_sampled(self) -> int:
        return self.estimator.bits_sampled

    @property
    def total_ones(self) -> int:
        return self.bias.ones

    @property
    def total_zeros(self) -> int:
        return self.bias.zeros

    # ── feeding ──

    def add_bit(self, bit: int | bool) -> int:
        """Process one bit and return the entropy bits it contributed."""
        self._start()
        return self._step(1 if bit else 0)

    def _start(self) -> None:
        if self._state is State.READY:
            self._state = State.RUNNING
        elif self._state is not State.RUNNING:
            raise EstimatorStateError(f"cannot add bits to a {self._state.value} health check")

    def _step(self, bit: int) -> int:
        self.total_bits += 1
        if self.debug and self.total_bits % self.config.report_interval == 0:
            self._log_progress()

        if self.estimator.bits_sampled > self.config.warmup_bits:
            self.bias.record(bit)
        zeros, ones = self.model.update(bit)
        extracted = self.estimator.accumulate(zeros, ones, bit)
        self.guard.check(self.model, self.estimator, self.bias)
        return extracted

    def add_byte(self, value: int) -> int:
        """Process the eight bits of *value*, most significant first."""
        extracted = 0
        for shift in range(7, -1, -1):
            extracted += self.add_bit((value >> shift) & 1)
        return extracted

    def add_bytes(self, data: bytes | bytearray | np.ndarray) -> int:
        """Process every byte of *data*, each most significant bit first."""
        raw = as_byte_array(data)
        self._start()
        step = self._step
        extracted = 0
        for bit in np.unpackbits(raw).tolist():
            extracted += step(bit)
        return extracted

    def feed(self, source: ByteSource) -> HealthCheck:
        """Consume *source* until it is exhausted."""
        for chunk in source.chunks():
            self.add_bytes(chunk)
        return self

    def iter_feed(self, source: ByteSource) -> Iterator[float]:
        """Consume *source*, yielding the running estimate after each chunk."""
        for chunk in source.chunks():
            self.add_bytes(chunk)
            yield self.entropy_per_bit()

    # ── results ──

    def entropy_per_bit(self) -> float:
        return self.estimator.entropy_per_bit()

    def branching_factor(self) -> float:
        return self.estimator.branching_factor()

    def ones_percent(self) -> float:
        return self.bias.ones_percent()

    def report(self) -> HealthReport:
        return HealthReport(
            n=self.n,
            entropy_per_bit=self.entropy_per_bit(),
            branching_factor=self.branching_factor(),
            entropy_bits=self.entropy_bits,
            bits_sampled=self.bits_sampled,
            total_bits=self.total_bits,
            ones_percent=self.ones_percent(),
            rescales=dict(self.guard.rescale_counts),
        )

    def dump_stats(self) -> Iterator[str]:
        """Yield one line per observed context with its counts."""
        if self.model.released:
            raise EstimatorStateError("count tables have been released")
        for ctx, zeros, ones in self.model.nonzero_contexts():
            yield f"{ctx:x} ones:{ones} zeros:{zeros}"

    def reset_stats(self) -> None:
        """Restart the estimate and bias counters, keeping the context tables."""
        self.estimator.reset()
        self.bias = BiasCounter()

    # ── lifecycle ──

    def finalize(self) -> HealthReport:
        if self._state is State.RELEASED:
            raise EstimatorStateError("health check has been released")
        self._state = State.FINALIZED
        return self.report()

    def release(self) -> None:
        self.model.release()
        self._state = State.RELEASED

    def __enter__(self) -> HealthCheck:
        return self

    def __exit__(self, *exc) -> None:
        self.release()

    def _log_progress(self) -> None:
        logger.info(
            "Generated %d bits.  Estimated entropy per bit: %f",
            self.total_bits,
            self.entropy_per_bit(),
        )
        logger.info("num1s:%f%%", self.ones_percent())

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} n={self.n} state={self._state.value} "
            f"bits={self.total_bits} H={self.entropy_per_bit():.4f}>"
        )


def analyze(
    n: int,
    source: ByteSource,
    *,
    config: HealthCheckConfig | None = None,
    debug: bool | None = None,
) -> HealthReport:
    """Run a complete check of *source* with an order-*n* model."""
    with HealthCheck(n, config=config, debug=debug) as hc, source:
        hc.feed(source)
        return hc.finalize()


__all__ = ["HealthCheck", "HealthReport", "Rescale", "State", "analyze"]
