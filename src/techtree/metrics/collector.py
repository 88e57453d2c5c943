"""
Metrics Collector — per-tick population statistics.

Computes quality and utility extremes, adopter-distribution entropy and
major transitions (rises of the population's quality floor). Provides
time series extraction and export for visualization.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from techtree.core.agent import Agent
from techtree.core.config import SimulationConfig
from techtree.core.state import SimulationState
from techtree.core.technology import TechnologyGraph


def shannon_entropy(counts: list[int] | np.ndarray) -> float:
    """
    Base-2 entropy of an adopter distribution.

    H = log2(N) - sum(n_i * log2(n_i)) / N over the non-zero n_i, which
    equals -sum(s_i * log2(s_i)) with s_i = n_i / N.
    """
    n = np.asarray(counts, dtype=np.float64)
    n = n[n > 0]
    if len(n) <= 1:
        return 0.0
    total = n.sum()
    h = np.log2(total) - float(np.sum(n * np.log2(n))) / total
    return float(max(h, 0.0))


@dataclass
class TickMetrics:
    """Observables for a single tick."""

    tick: int

    # Innovation
    innovators: int
    technologies_created: int
    recombinations: int
    cumulative_recombinations: int

    # Adoption
    switches: int

    # Quality levels of agents' current technologies
    min_quality: int
    mean_quality: float
    max_quality: int

    # Utilities of agents' current technologies
    min_utility: float
    mean_utility: float
    max_utility: float

    # Diversity
    entropy: float
    cumulative_entropy: float

    # Transitions
    transition: bool
    transition_size: int
    cumulative_transitions: int
    last_transition_quality_level: int

    # Graph
    technology_count: int
    edge_count: int
    populated_technology_count: int
    agents_per_technology: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {k: (list(v) if isinstance(v, list) else v) for k, v in self.__dict__.items()}


class MetricsCollector:
    """
    Aggregates statistics once per tick.

    The collector reads the population and graph and updates the
    transition and entropy aggregates of the driver's ``SimulationState``.
    ``transition_sizes`` gets one entry per tick, 0 when no transition
    happened.
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.factor = config.network_externality_factor
        self.metrics_history: list[TickMetrics] = []

    def collect(
        self,
        population: list[Agent],
        graph: TechnologyGraph,
        state: SimulationState,
        innovators: int = 0,
        technologies_created: int = 0,
        recombinations: int = 0,
        switches: int = 0,
    ) -> TickMetrics:
        """Collect metrics for the tick recorded in ``state.tick``."""
        techs = [graph[a.current_technology] for a in population]
        quality = np.array([t.quality_level for t in techs], dtype=np.int64)
        utilities = np.array(
            [t.quality_level + t.adopter_count * self.factor for t in techs],
            dtype=np.float64,
        )

        agents_per_technology = graph.adopter_counts()
        entropy = shannon_entropy(agents_per_technology)
        state.cumulative_entropy += entropy

        min_quality = int(quality.min())
        transition = min_quality > state.last_transition_quality_level
        transition_size = 0
        if transition:
            transition_size = min_quality - state.last_transition_quality_level
            state.cumulative_transitions += 1
            state.last_transition_quality_level = min_quality
        state.transition_sizes.append(transition_size)

        metrics = TickMetrics(
            tick=state.tick,
            innovators=innovators,
            technologies_created=technologies_created,
            recombinations=recombinations,
            cumulative_recombinations=state.cumulative_recombinations,
            switches=switches,
            min_quality=min_quality,
            mean_quality=float(quality.mean()),
            max_quality=int(quality.max()),
            min_utility=float(utilities.min()),
            mean_utility=float(utilities.mean()),
            max_utility=float(utilities.max()),
            entropy=entropy,
            cumulative_entropy=state.cumulative_entropy,
            transition=transition,
            transition_size=transition_size,
            cumulative_transitions=state.cumulative_transitions,
            last_transition_quality_level=state.last_transition_quality_level,
            technology_count=len(graph),
            edge_count=len(graph.edges),
            populated_technology_count=sum(1 for c in agents_per_technology if c > 0),
            agents_per_technology=agents_per_technology,
        )
        self.metrics_history.append(metrics)
        return metrics

    def get_time_series(self, field_name: str) -> list[Any]:
        """Extract a time series for a specific metric field."""
        if field_name not in TickMetrics.__dataclass_fields__:
            raise AttributeError(f"Unknown metric field: '{field_name}'")
        return [getattr(m, field_name) for m in self.metrics_history]

    def transition_size_series(self) -> list[int]:
        return self.get_time_series("transition_size")

    def export_for_visualization(self) -> list[dict[str, Any]]:
        """Export all metrics as a list of JSON-serializable dicts."""
        return [m.to_dict() for m in self.metrics_history]
