"""
Experiment Runner — regime comparisons, parameter sweeps, and batch execution.

Provides tools for running comparative experiments, sweeping parameters,
and collecting results across multiple simulation runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from techtree.core.config import SimulationConfig
from techtree.core.engine import SimulationEngine
from techtree.core.technology import TechnologyGraph
from techtree.metrics.collector import TickMetrics


@dataclass
class ExperimentResult:
    """Result of a single experiment run."""
    config: SimulationConfig
    history: list[TickMetrics]
    graph: TechnologyGraph
    final_tick: int
    total_recombinations: int
    total_transitions: int
    mean_transition_size: float
    mean_entropy: float
    final_technology_count: int
    final_mean_quality: float
    transition_sizes: list[int] = field(default_factory=list)

    def summary(self) -> dict[str, Any]:
        return {
            "experiment_name": self.config.experiment_name,
            "final_tick": self.final_tick,
            "total_recombinations": self.total_recombinations,
            "total_transitions": self.total_transitions,
            "mean_transition_size": self.mean_transition_size,
            "mean_entropy": self.mean_entropy,
            "final_technology_count": self.final_technology_count,
            "final_mean_quality": self.final_mean_quality,
        }


@dataclass
class ComparisonResult:
    """Result of comparing two or more experiments."""
    results: dict[str, ExperimentResult]
    config_diffs: dict[str, Any]


class ExperimentRunner:
    """
    Run, compare, and sweep simulation experiments.
    """

    def run_experiment(
        self,
        config: SimulationConfig,
        ticks: int | None = None,
    ) -> ExperimentResult:
        """Run a single experiment and return results."""
        engine = SimulationEngine(config)
        history = engine.run(ticks)
        state = engine.state

        # Mean size over ticks where a transition actually happened
        sizes = [s for s in state.transition_sizes if s > 0]
        final = history[-1] if history else None

        return ExperimentResult(
            config=config,
            history=history,
            graph=engine.graph,
            final_tick=state.tick,
            total_recombinations=state.cumulative_recombinations,
            total_transitions=state.cumulative_transitions,
            mean_transition_size=float(np.mean(sizes)) if sizes else 0.0,
            mean_entropy=(state.cumulative_entropy / state.tick) if state.tick else 0.0,
            final_technology_count=len(engine.graph),
            final_mean_quality=final.mean_quality if final else float(config.base_quality),
            transition_sizes=list(state.transition_sizes),
        )

    def compare_experiments(
        self,
        configs: dict[str, SimulationConfig],
        ticks: int | None = None,
    ) -> ComparisonResult:
        """Run multiple experiments and compare results."""
        results: dict[str, ExperimentResult] = {}
        for name, config in configs.items():
            results[name] = self.run_experiment(config, ticks)

        # Diffs are taken against the first config
        config_names = list(configs.keys())
        diffs: dict[str, Any] = {}
        if len(config_names) >= 2:
            base = configs[config_names[0]]
            for name in config_names[1:]:
                diffs[f"{config_names[0]}_vs_{name}"] = base.diff(configs[name])

        return ComparisonResult(results=results, config_diffs=diffs)

    def run_ab_test(
        self,
        config_a: SimulationConfig,
        config_b: SimulationConfig,
        label_a: str = "A",
        label_b: str = "B",
        ticks: int | None = None,
    ) -> ComparisonResult:
        """Run an A/B test between two configurations."""
        return self.compare_experiments({label_a: config_a, label_b: config_b}, ticks)

    def compare_regimes(
        self,
        config: SimulationConfig,
        ticks: int | None = None,
    ) -> ComparisonResult:
        """Run ``config`` under independent and recombinant innovation, same seed."""
        d = config.to_dict()
        independent = SimulationConfig.from_dict({
            **d, "recombination_enabled": False,
            "experiment_name": f"{config.experiment_name}_independent",
        })
        recombinant = SimulationConfig.from_dict({
            **d, "recombination_enabled": True,
            "experiment_name": f"{config.experiment_name}_recombinant",
        })
        return self.run_ab_test(
            independent, recombinant,
            label_a="independent", label_b="recombinant", ticks=ticks,
        )

    def run_parameter_sweep(
        self,
        base_config: SimulationConfig,
        param_name: str,
        values: list[Any],
        ticks: int | None = None,
    ) -> dict[str, ExperimentResult]:
        """
        Sweep a single parameter across multiple values.

        Args:
            base_config: Base configuration to modify
            param_name: Name of the parameter to sweep (attribute on SimulationConfig)
            values: List of values to test
            ticks: Override for the run length

        Returns:
            Dict mapping value label -> ExperimentResult
        """
        if param_name not in base_config.to_dict():
            raise KeyError(f"Unknown parameter: '{param_name}'")

        results: dict[str, ExperimentResult] = {}
        for val in values:
            config_dict = base_config.to_dict()
            config_dict[param_name] = val
            config_dict["experiment_name"] = f"sweep_{param_name}={val}"
            config = SimulationConfig.from_dict(config_dict)

            label = f"{param_name}={val}"
            results[label] = self.run_experiment(config, ticks)

        return results

    def run_multi_seed(
        self,
        config: SimulationConfig,
        seeds: list[int],
        ticks: int | None = None,
    ) -> list[ExperimentResult]:
        """
        Run the same configuration with multiple random seeds.

        Useful for measuring variance in outcomes.
        """
        results: list[ExperimentResult] = []
        for seed in seeds:
            config_dict = config.to_dict()
            config_dict["random_seed"] = seed
            config_dict["experiment_name"] = f"{config.experiment_name}_seed{seed}"
            seed_config = SimulationConfig.from_dict(config_dict)
            results.append(self.run_experiment(seed_config, ticks))
        return results
