"""Tests for the bit context model."""

import pytest

from inm_health.context import BitContextModel


class TestUpdate:
    def test_returns_counts_before_increment(self):
        m = BitContextModel(2)
        assert m.update(1) == (0, 0)
        m.update(0)
        m.update(1)
        m.update(0)
        # context is back to 0b10 after 1,0,1,0; it has seen one 1 before
        assert m.context == 0b10
        assert m.update(1) == (0, 1)

    def test_shifts_and_masks(self):
        m = BitContextModel(2)
        m.update(1)
        assert m.context == 0b01
        m.update(1)
        assert m.context == 0b11
        m.update(0)
        assert m.context == 0b10

    def test_counts_recorded_at_previous_context(self):
        m = BitContextModel(2)
        for bit in (1, 1, 0):
            m.update(bit)
        assert m.counts(0b00) == (0, 1)
        assert m.counts(0b01) == (0, 1)
        assert m.counts(0b11) == (1, 0)
        assert m.counts(0b10) == (0, 0)

    def test_observations_match_visits(self):
        m = BitContextModel(1)
        bits = [0, 0, 1, 0, 1, 1, 1, 0]
        for bit in bits:
            m.update(bit)
        # context 0 is the initial state plus every bit following a zero
        assert m.observations(0) + m.observations(1) == len(bits)
        assert m.observations(0) == 1 + bits[:-1].count(0)

    def test_last_count(self):
        m = BitContextModel(3)
        m.update(0)
        assert m.last_count == 1
        m = BitContextModel(1)
        m.update(0)
        m.update(0)
        assert m.last_count == 2


    def test_returns_plain_ints(self):
        m = BitContextModel(3)
        m.update(1)
        zeros, ones = m.update(0)
        assert type(zeros) is int and type(ones) is int
        assert all(type(c) is int for c in m.counts(0))


class TestHalve:
    def test_halves_every_context(self):
        m = BitContextModel(1)
        for bit in [0] * 5 + [1] * 4:
            m.update(bit)
        before = {ctx: (z, o) for ctx, z, o in m.nonzero_contexts()}
        m.halve()
        for ctx, (z, o) in before.items():
            assert m.counts(ctx) == (z >> 1, o >> 1)

    def test_halves_last_count(self):
        m = BitContextModel(1)
        for _ in range(6):
            m.update(0)
        m.halve()
        assert m.last_count == 3


class TestLifecycle:
    def test_size(self):
        assert BitContextModel(4).size == 16

    def test_nonzero_contexts_empty(self):
        assert list(BitContextModel(4).nonzero_contexts()) == []

    def test_release(self):
        m = BitContextModel(4)
        m.release()
        assert m.released

    def test_repr(self):
        assert "n=4" in repr(BitContextModel(4))


@pytest.mark.parametrize("n", [1, 8, 16])
def test_table_size_matches_n(n):
    assert BitContextModel(n).size == 1 << n
