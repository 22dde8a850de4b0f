"""Overflow guard.

Counters are periodically halved so that a check can run on an unbounded
stream with fixed-width accumulators. Each halving keeps the ratio it
protects (relative context frequencies, entropy per bit, bias) and gives up
precision from the oldest observations.
"""

from __future__ import annotations

import enum
import logging
from collections import Counter
from dataclasses import dataclass

from inm_health.context import BitContextModel
from inm_health.estimator import SequentialEstimator

logger = logging.getLogger(__name__)


class Rescale(enum.Flag):
    """Rescalings performed by one guard check."""

    NONE = 0
    CONTEXTS = enum.auto()
    ENTROPY = enum.auto()
    BIAS = enum.auto()


@dataclass
class BiasCounter:
    """Global count of ones and zeros, used only for diagnostics."""

    ones: int = 0
    zeros: int = 0

    def record(self, bit: int) -> None:
        if bit:
            self.ones += 1
        else:
            self.zeros += 1

    def halve(self) -> None:
        self.ones >>= 1
        self.zeros >>= 1

    def ones_percent(self) -> float:
        total = self.ones + self.zeros
        if total == 0:
            return 0.0
        return self.ones * 100.0 / total


class OverflowGuard:
    """Halves counters when they reach their ceilings."""

    def __init__(self, max_count: int, max_samples: int) -> None:
        self.max_count = max_count
        self.max_samples = max_samples
        self.rescale_counts: Counter[str] = Counter()

    def check(
        self,
        model: BitContextModel,
        estimator: SequentialEstimator,
        bias: BiasCounter,
    ) -> Rescale:
        done = Rescale.NONE
        if model.last_count >= self.max_count:
            model.halve()
            done |= Rescale.CONTEXTS
        if estimator.bits_sampled >= self.max_samples:
            estimator.halve()
            done |= Rescale.ENTROPY
        if max(bias.ones, bias.zeros) >= self.max_samples:
            bias.halve()
            done |= Rescale.BIAS
        if done:
            for flag in (Rescale.CONTEXTS, Rescale.ENTROPY, Rescale.BIAS):
                if flag in done:
                    self.rescale_counts[flag.name.lower()] += 1
            logger.debug("rescaled %s", done)
        return done
