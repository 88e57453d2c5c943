"""
Distance engine — hop distances over the derivation graph.

Edges are treated as undirected with unit weight. Results are numpy
arrays indexed by technology id.
"""

from __future__ import annotations

from collections import deque

import numpy as np

from techtree.core.technology import TechnologyGraph

# Larger than any real hop count, still safe to subtract from a float utility
UNREACHABLE = np.iinfo(np.int32).max


def distances_from(graph: TechnologyGraph, source_id: int) -> np.ndarray:
    """Breadth-first hop distance from ``source_id`` to every technology."""
    dist = np.full(len(graph), UNREACHABLE, dtype=np.int64)
    dist[source_id] = 0
    queue: deque[int] = deque([source_id])
    while queue:
        node = queue.popleft()
        next_d = dist[node] + 1
        for nb in graph.neighbors(node):
            if dist[nb] == UNREACHABLE:
                dist[nb] = next_d
                queue.append(nb)
    return dist


class DistanceEngine:
    """
    Per-source distance lookup with a cache tied to the graph version.

    Any structural mutation bumps ``graph.version``, which drops every
    cached row, so a lookup never returns distances for a stale graph.
    """

    def __init__(self, graph: TechnologyGraph):
        self.graph = graph
        self._cache: dict[int, np.ndarray] = {}
        self._cached_version = graph.version
        self.computations = 0

    def distances_from(self, source_id: int) -> np.ndarray:
        if self.graph.version != self._cached_version:
            self._cache.clear()
            self._cached_version = self.graph.version
        row = self._cache.get(source_id)
        if row is None:
            row = distances_from(self.graph, source_id)
            row.setflags(write=False)
            self._cache[source_id] = row
            self.computations += 1
        return row
