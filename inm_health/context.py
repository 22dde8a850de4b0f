"""Order-N binary context model.

For every possible N-bit history the model keeps how often a zero and a one
followed it. Counts are read before they are incremented so the estimator
only ever sees what was known before the bit arrived.
"""

from __future__ import annotations

from typing import Iterator

import numpy as np

from inm_health.errors import ResourceError


class BitContextModel:
    """Count tables indexed by the last ``n`` observed bits."""

    def __init__(self, n: int) -> None:
        self.n = n
        self._mask = (1 << n) - 1
        self._context = 0
        self.last_count = 0
        try:
            self._zeros = np.zeros(1 << n, dtype=np.uint32)
            self._ones = np.zeros(1 << n, dtype=np.uint32)
        except (MemoryError, ValueError) as e:
            self.release()
            raise ResourceError(f"unable to allocate count tables for N={n}: {e}") from e

    @property
    def context(self) -> int:
        """Current shift register holding the last ``n`` bits."""
        return self._context

    @property
    def size(self) -> int:
        return self._mask + 1

    def counts(self, context: int) -> tuple[int, int]:
        """Return ``(zeros, ones)`` observed after *context*."""
        return self._zeros.item(context), self._ones.item(context)

    def observations(self, context: int) -> int:
        zeros, ones = self.counts(context)
        return zeros + ones

    def update(self, bit: int) -> tuple[int, int]:
        """Record *bit* after the current context and shift it in.

        Returns the ``(zeros, ones)`` counts as they were before the update.
        """
        ctx = self._context
        zeros = self._zeros.item(ctx)
        ones = self._ones.item(ctx)
        if bit:
            self.last_count = ones + 1
            self._ones[ctx] = self.last_count
        else:
            self.last_count = zeros + 1
            self._zeros[ctx] = self.last_count
        self._context = ((ctx << 1) | (1 if bit else 0)) & self._mask
        return zeros, ones

    def halve(self) -> None:
        """Halve every count of every context, flooring odd values."""
        self._zeros >>= 1
        self._ones >>= 1
        self.last_count >>= 1

    def nonzero_contexts(self) -> Iterator[tuple[int, int, int]]:
        """Yield ``(context, zeros, ones)`` for every context seen so far."""
        seen = np.flatnonzero((self._zeros | self._ones) != 0)
        for ctx in seen:
            yield int(ctx), int(self._zeros[ctx]), int(self._ones[ctx])

    def release(self) -> None:
        self._zeros = None
        self._ones = None

    @property
    def released(self) -> bool:
        return self._zeros is None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} n={self.n} context={self._context:#x}>"
