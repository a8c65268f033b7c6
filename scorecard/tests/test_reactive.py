"""
Tests for reactive nodes

Run with: pytest scorecard/tests/test_reactive.py -v
"""

import operator

import polars as pl

from scorecard.view.reactive import Computed, Source


class TestSource:
    """Tests for Source.set equality handling."""

    def test_set_changed_value(self):
        s = Source(1)
        assert s.set(2) is True
        assert s.get() == 2

    def test_set_equal_value_is_noop(self):
        s = Source(1)
        doubled = Computed(lambda x: x * 2, s)
        doubled.get()

        assert s.set(1) is False
        assert not doubled.dirty

    def test_identity_equality_for_frames(self):
        df = pl.DataFrame({"a": [1]})
        s = Source(df, equals=operator.is_)

        assert s.set(df) is False
        assert s.set(df.clone()) is True


class TestComputed:
    """Tests for lazy recomputation and invalidation."""

    def test_lazy_until_read(self):
        s = Source(3)
        c = Computed(lambda x: x + 1, s)

        assert c.recomputes == 0
        assert c.get() == 4
        assert c.recomputes == 1

    def test_memoized(self):
        s = Source(3)
        c = Computed(lambda x: x + 1, s)
        c.get()
        c.get()
        assert c.recomputes == 1

    def test_invalidation_is_transitive_and_synchronous(self):
        a = Source(1)
        b = Computed(lambda x: x + 1, a)
        c = Computed(lambda x: x * 10, b)
        assert c.get() == 20

        a.set(5)

        assert b.dirty and c.dirty
        assert c.get() == 60

    def test_many_sets_one_recompute(self):
        a = Source(0)
        c = Computed(lambda x: x, a)
        c.get()

        for i in range(1, 6):
            a.set(i)

        assert c.get() == 5
        assert c.recomputes == 2

    def test_diamond_recomputes_once(self):
        """A node reached by two paths recomputes once per change."""
        a = Source(1)
        left = Computed(lambda x: x + 1, a)
        right = Computed(lambda x: x * 2, a)
        bottom = Computed(lambda x, y: x + y, left, right)
        assert bottom.get() == 4

        a.set(2)

        assert bottom.get() == 7
        assert bottom.recomputes == 2
        assert left.recomputes == 2
        assert right.recomputes == 2

    def test_unrelated_source_leaves_node_clean(self):
        a, b = Source(1), Source(2)
        only_a = Computed(lambda x: x, a)
        only_a.get()

        b.set(3)

        assert not only_a.dirty
