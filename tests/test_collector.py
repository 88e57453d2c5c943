"""Tests for MetricsCollector and entropy."""

import math

import pytest

from techtree.core.agent import Agent
from techtree.core.config import SimulationConfig
from techtree.core.state import SimulationState
from techtree.core.technology import TechnologyGraph
from techtree.metrics.collector import MetricsCollector, TickMetrics, shannon_entropy


def _populate(graph: TechnologyGraph, counts: dict[int, int]) -> list[Agent]:
    population: list[Agent] = []
    for tech_id, n in counts.items():
        for _ in range(n):
            agent = Agent(id=len(population), current_technology=tech_id)
            graph.place(agent, tech_id)
            population.append(agent)
    return population


class TestEntropy:
    def test_single_technology_is_zero(self):
        assert shannon_entropy([7]) == 0.0

    def test_zero_entries_ignored(self):
        assert shannon_entropy([0, 2, 0, 2]) == pytest.approx(1.0)

    def test_uniform(self):
        assert shannon_entropy([3, 3, 3, 3]) == pytest.approx(2.0)

    def test_skewed(self):
        expected = -(0.75 * math.log2(0.75) + 0.25 * math.log2(0.25))
        assert shannon_entropy([3, 1]) == pytest.approx(expected)

    def test_upper_bound(self):
        assert shannon_entropy([1] * 16) == pytest.approx(math.log2(16))

    def test_empty(self):
        assert shannon_entropy([]) == 0.0


class TestCollect:
    def test_quality_and_utility_extremes(self):
        config = SimulationConfig(network_externality_factor=0.5)
        g = TechnologyGraph.with_seed()
        g.create_technology([0])
        pop = _populate(g, {0: 3, 1: 1})
        m = MetricsCollector(config).collect(pop, g, SimulationState.initial())

        assert isinstance(m, TickMetrics)
        assert m.min_quality == 0
        assert m.max_quality == 1
        assert m.mean_quality == pytest.approx(0.25)
        # utilities: 1.5, 1.5, 1.5, 1.5
        assert m.min_utility == pytest.approx(1.5)
        assert m.max_utility == pytest.approx(1.5)
        assert m.agents_per_technology == [3, 1]
        assert m.technology_count == 2
        assert m.edge_count == 1
        assert m.populated_technology_count == 2

    def test_entropy_accumulates(self):
        config = SimulationConfig()
        g = TechnologyGraph.with_seed()
        g.create_technology([0])
        pop = _populate(g, {0: 2, 1: 2})
        state = SimulationState.initial()
        collector = MetricsCollector(config)
        collector.collect(pop, g, state)
        m = collector.collect(pop, g, state)
        assert m.entropy == pytest.approx(1.0)
        assert m.cumulative_entropy == pytest.approx(2.0)
        assert state.cumulative_entropy == pytest.approx(2.0)

    def test_recombination_counts_passed_through(self):
        g = TechnologyGraph.with_seed()
        pop = _populate(g, {0: 2})
        state = SimulationState.initial()
        state.cumulative_recombinations = 4
        m = MetricsCollector(SimulationConfig()).collect(pop, g, state, recombinations=1)
        assert m.recombinations == 1
        assert m.cumulative_recombinations == 4


class TestTransitions:
    def test_floor_rise_counts_once(self):
        g = TechnologyGraph.with_seed()
        g.create_technology([0])
        pop = _populate(g, {0: 3})
        state = SimulationState.initial(base_quality=0)
        collector = MetricsCollector(SimulationConfig())

        # Sentinel sits below the seed level, so the first tick records a rise
        first = collector.collect(pop, g, state)
        assert first.transition
        assert first.transition_size == 1
        assert state.last_transition_quality_level == 0

        for a in pop:
            g.transfer(a, 1)
        second = collector.collect(pop, g, state)
        assert second.transition
        assert second.transition_size == 1
        assert second.cumulative_transitions == first.cumulative_transitions + 1
        assert state.last_transition_quality_level == 1

        third = collector.collect(pop, g, state)
        assert not third.transition
        assert third.transition_size == 0
        assert third.cumulative_transitions == second.cumulative_transitions

    def test_partial_migration_is_not_a_transition(self):
        g = TechnologyGraph.with_seed()
        g.create_technology([0])
        pop = _populate(g, {0: 3})
        state = SimulationState.initial()
        collector = MetricsCollector(SimulationConfig())
        collector.collect(pop, g, state)
        g.transfer(pop[0], 1)
        m = collector.collect(pop, g, state)
        assert not m.transition
        assert m.min_quality == 0

    def test_jump_size(self):
        g = TechnologyGraph.with_seed()
        g.create_technology([0])
        g.create_technology([1])
        g.create_technology([2])
        pop = _populate(g, {0: 2})
        state = SimulationState.initial()
        collector = MetricsCollector(SimulationConfig())
        collector.collect(pop, g, state)
        for a in pop:
            g.transfer(a, 3)
        m = collector.collect(pop, g, state)
        assert m.transition_size == 3

    def test_series_has_one_value_per_tick(self):
        g = TechnologyGraph.with_seed()
        pop = _populate(g, {0: 2})
        state = SimulationState.initial()
        collector = MetricsCollector(SimulationConfig())
        for _ in range(4):
            collector.collect(pop, g, state)
        assert collector.transition_size_series() == [1, 0, 0, 0]
        assert state.transition_sizes == [1, 0, 0, 0]


class TestTimeSeries:
    def test_get_time_series(self):
        g = TechnologyGraph.with_seed()
        pop = _populate(g, {0: 2})
        state = SimulationState.initial()
        collector = MetricsCollector(SimulationConfig())
        collector.collect(pop, g, state)
        assert collector.get_time_series("entropy") == [0.0]

    def test_unknown_field(self):
        with pytest.raises(AttributeError, match="Unknown metric field"):
            MetricsCollector(SimulationConfig()).get_time_series("nope")

    def test_export(self):
        g = TechnologyGraph.with_seed()
        pop = _populate(g, {0: 2})
        collector = MetricsCollector(SimulationConfig())
        collector.collect(pop, g, SimulationState.initial())
        exported = collector.export_for_visualization()
        assert exported[0]["agents_per_technology"] == [2]
        assert exported[0]["min_quality"] == 0
