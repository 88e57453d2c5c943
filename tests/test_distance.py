"""Tests for the distance engine."""

import numpy as np

from techtree.core.distance import UNREACHABLE, DistanceEngine, distances_from
from techtree.core.technology import Technology, TechnologyGraph


def _chain(length: int) -> TechnologyGraph:
    g = TechnologyGraph.with_seed()
    for i in range(length):
        g.create_technology([i])
    return g


class TestDistancesFrom:
    def test_source_is_zero(self):
        g = _chain(3)
        assert distances_from(g, 2)[2] == 0

    def test_chain_both_directions(self):
        g = _chain(3)  # 0 - 1 - 2 - 3
        assert distances_from(g, 0).tolist() == [0, 1, 2, 3]
        assert distances_from(g, 3).tolist() == [3, 2, 1, 0]

    def test_siblings_route_through_parent(self):
        g = TechnologyGraph.with_seed()
        g.create_technology([0])
        g.create_technology([0])
        assert distances_from(g, 1).tolist() == [1, 0, 2]

    def test_recombination_shortcut(self):
        g = _chain(4)                  # 0 - 1 - 2 - 3 - 4
        g.create_technology([0, 4])    # 5 joins both ends
        d = distances_from(g, 0)
        assert d[5] == 1
        assert d[4] == 2
        assert d[3] == 3

    def test_unreachable_sentinel(self):
        g = TechnologyGraph.with_seed()
        g._append(Technology(id=1, quality_level=0))
        d = distances_from(g, 0)
        assert d[1] == UNREACHABLE
        assert UNREACHABLE > len(g)

    def test_integer_dtype(self):
        d = distances_from(_chain(2), 0)
        assert np.issubdtype(d.dtype, np.integer)


class TestDistanceEngine:
    def test_cache_hit(self):
        g = _chain(3)
        engine = DistanceEngine(g)
        a = engine.distances_from(1)
        b = engine.distances_from(1)
        assert a is b
        assert engine.computations == 1

    def test_cache_dropped_after_growth(self):
        g = _chain(2)
        engine = DistanceEngine(g)
        before = engine.distances_from(0)
        g.create_technology([2])
        after = engine.distances_from(0)
        assert len(before) == 3
        assert after.tolist() == [0, 1, 2, 3]
        assert engine.computations == 2

    def test_rows_are_read_only(self):
        engine = DistanceEngine(_chain(1))
        row = engine.distances_from(0)
        assert not row.flags.writeable
