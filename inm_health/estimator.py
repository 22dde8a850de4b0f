"""Sequential probability estimator.

The probability of the observed sequence is kept as a running product. Each
time it drops to 0.5 or below it is doubled and one bit of entropy is
counted, so the total self-information of the sequence is

    entropy_bits - log2(probability)

and the product never underflows however long the stream runs.
"""

from __future__ import annotations


class SequentialEstimator:
    """Accumulates bits of self-information one observed bit at a time."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.probability = 1.0
        self.entropy_bits = 0
        self.bits_sampled = 0

    def accumulate(self, zeros: int, ones: int, bit: int) -> int:
        """Fold one bit, given the counts of its context before the update.

        A bit never seen before in its context leaves the probability
        untouched rather than driving it to zero. Returns the number of
        whole entropy bits extracted by this step.
        """
        count = ones if bit else zeros
        if count != 0:
            self.probability *= count / (zeros + ones)
        extracted = 0
        while self.probability <= 0.5:
            self.probability *= 2.0
            extracted += 1
        self.entropy_bits += extracted
        self.bits_sampled += 1
        return extracted

    def entropy_per_bit(self) -> float:
        """Maximum-likelihood entropy per bit, 0.0 before any bit."""
        if self.bits_sampled == 0:
            return 0.0
        return self.entropy_bits / self.bits_sampled

    def branching_factor(self) -> float:
        """Effective number of equally likely next states, ``2 ** H``."""
        return 2.0 ** self.entropy_per_bit()

    def halve(self) -> None:
        self.entropy_bits >>= 1
        self.bits_sampled >>= 1
