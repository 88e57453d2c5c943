"""
Main simulation engine.

Advances discrete ticks with 3 stages per tick and full metrics
collection. One seeded numpy generator backs every stochastic draw, so
two engines built from equal configs produce identical histories.
"""

from __future__ import annotations

import logging

import numpy as np

from techtree.core.agent import Agent
from techtree.core.config import SimulationConfig
from techtree.core.decision import AdoptionModel
from techtree.core.distance import DistanceEngine
from techtree.core.innovation import run_innovation_stage
from techtree.core.state import SimulationState
from techtree.core.technology import TechnologyGraph
from techtree.metrics.collector import MetricsCollector, TickMetrics

logger = logging.getLogger(__name__)


class SimulationEngine:
    """
    Main simulation loop.

    Stages per tick:
    1. Innovation (sample innovators, create technologies, migrate them)
    2. Adoption decisions (snapshot scores, then decide in agent order)
    3. Aggregation (statistics, transitions, entropy)
    """

    def __init__(self, config: SimulationConfig):
        config.validate()
        self.config = config
        self.adoption = AdoptionModel(config)
        self.setup()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def setup(self) -> None:
        """Create the seed technology and the whole population on it."""
        cfg = self.config
        self.rng = np.random.default_rng(cfg.random_seed)
        self.graph = TechnologyGraph.with_seed(cfg.base_quality)
        self.distances = DistanceEngine(self.graph)
        self.population: list[Agent] = []
        for i in range(cfg.num_agents):
            agent = Agent(id=i, current_technology=0)
            self.graph.place(agent, 0)
            self.population.append(agent)
        self.state = SimulationState.initial(cfg.base_quality)
        self.collector = MetricsCollector(cfg)
        self.history: list[TickMetrics] = self.collector.metrics_history
        logger.info(
            "Setup '%s': %d agents, p_innovation=%.4f, externality=%.3f, "
            "recombination=%s, seed=%s",
            cfg.experiment_name, cfg.num_agents, cfg.p_innovation,
            cfg.network_externality_factor, cfg.recombination_enabled,
            cfg.random_seed,
        )

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    @property
    def tick(self) -> int:
        return self.state.tick

    @property
    def is_paused(self) -> bool:
        pause = self.config.pause_at_tick
        return pause is not None and self.state.tick == pause

    def step(self) -> TickMetrics:
        """Advance exactly one tick and return its observables."""
        cfg = self.config
        self.state.tick += 1
        tick = self.state.tick

        # === Stage 1: Innovation ===
        innovation = run_innovation_stage(
            self.population, self.graph,
            recombination_enabled=cfg.recombination_enabled,
            p_innovation=cfg.p_innovation,
            rng=self.rng,
            tick=tick,
        )
        self.state.cumulative_recombinations += innovation.recombinations
        if cfg.check_invariants:
            self.graph.check_invariants(self.population)

        # === Stage 2: Adoption decisions ===
        decisions = self.adoption.run_decision_stage(
            self.population, self.graph, self.distances, self.rng,
        )
        if cfg.check_invariants:
            self.graph.check_invariants(self.population)

        # === Stage 3: Aggregation ===
        metrics = self.collector.collect(
            self.population, self.graph, self.state,
            innovators=innovation.innovators,
            technologies_created=len(innovation.created),
            recombinations=innovation.recombinations,
            switches=decisions.switches,
        )
        logger.debug(
            "Tick %d: %d innovators, %d new technologies, %d switches, "
            "quality %d..%d, entropy %.4f",
            tick, innovation.innovators, len(innovation.created),
            decisions.switches, metrics.min_quality, metrics.max_quality,
            metrics.entropy,
        )
        return metrics

    def run_until(self, tick_limit: int) -> list[TickMetrics]:
        """
        Step until ``tick == tick_limit``.

        Stops early when the clock reaches ``pause_at_tick``. Returns the
        metrics of the ticks advanced by this call.
        """
        pause = self.config.pause_at_tick
        if pause is not None and pause > self.state.tick:
            tick_limit = min(tick_limit, pause)
        advanced: list[TickMetrics] = []
        while self.state.tick < tick_limit:
            advanced.append(self.step())
        return advanced

    def run(self, ticks: int | None = None) -> list[TickMetrics]:
        """Run a fresh simulation to the pause tick or for ``ticks_to_run`` ticks."""
        if ticks is None:
            pause = self.config.pause_at_tick
            ticks = pause if pause is not None else self.config.ticks_to_run
        self.setup()
        self.run_until(ticks)
        return self.history
