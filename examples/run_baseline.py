#!/usr/bin/env python3
"""Run independent vs recombinant innovation on one seed and print results."""

import logging

from techtree.experiment.presets import get_preset
from techtree.experiment.runner import ExperimentRunner


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = get_preset("baseline")
    config.random_seed = 42

    print(f"=== Techtree: {config.experiment_name} ===")
    print(f"Agents: {config.num_agents}")
    print(f"p_innovation: {config.p_innovation}")
    print(f"Network externality: {config.network_externality_factor}")
    print(f"Ticks: {config.ticks_to_run}")
    print()

    comparison = ExperimentRunner().compare_regimes(config)

    for label, result in comparison.results.items():
        print(f"--- {label} ---")
        print(f"{'Tick':>5} {'Techs':>6} {'MinQ':>5} {'MeanQ':>7} {'MaxQ':>5} "
              f"{'Entropy':>8} {'Recomb':>7} {'Trans':>6}")
        print("-" * 56)
        for m in result.history[::20]:
            print(
                f"{m.tick:5d} {m.technology_count:6d} {m.min_quality:5d} "
                f"{m.mean_quality:7.2f} {m.max_quality:5d} {m.entropy:8.4f} "
                f"{m.cumulative_recombinations:7d} {m.cumulative_transitions:6d}"
            )
        print()
        for key, value in result.summary().items():
            print(f"  {key:24s}: {value}")
        print()


if __name__ == "__main__":
    main()
