"""
Experiment presets — pre-configured experiment templates.

Each preset returns a SimulationConfig probing one innovation regime or
network-effect strength.
"""

from __future__ import annotations

from typing import Callable

from techtree.core.config import SimulationConfig


def baseline() -> SimulationConfig:
    """Independent innovation lines with a mild network effect."""
    return SimulationConfig(
        experiment_name="baseline",
        num_agents=100,
        ticks_to_run=200,
    )


def recombinant() -> SimulationConfig:
    """Same as baseline, but innovators merge all occupied lines into one."""
    return SimulationConfig(
        experiment_name="recombinant",
        num_agents=100,
        ticks_to_run=200,
        recombination_enabled=True,
    )


def strong_network() -> SimulationConfig:
    """Network externalities dominate quality: lock-in is expected."""
    return SimulationConfig(
        experiment_name="strong_network",
        num_agents=100,
        ticks_to_run=200,
        network_externality_factor=1.0,
    )


def no_network() -> SimulationConfig:
    """Pure quality race, adopter counts do not matter."""
    return SimulationConfig(
        experiment_name="no_network",
        num_agents=100,
        ticks_to_run=200,
        network_externality_factor=0.0,
    )


def high_innovation() -> SimulationConfig:
    """Ten times the baseline innovation rate."""
    return SimulationConfig(
        experiment_name="high_innovation",
        num_agents=100,
        ticks_to_run=200,
        p_innovation=0.1,
    )


def rapid_recombinant() -> SimulationConfig:
    """High innovation rate with recombination."""
    return SimulationConfig(
        experiment_name="rapid_recombinant",
        num_agents=100,
        ticks_to_run=200,
        p_innovation=0.1,
        recombination_enabled=True,
    )


# Registry of all presets
PRESETS: dict[str, Callable[[], SimulationConfig]] = {
    "baseline": baseline,
    "recombinant": recombinant,
    "strong_network": strong_network,
    "no_network": no_network,
    "high_innovation": high_innovation,
    "rapid_recombinant": rapid_recombinant,
}


def get_preset(name: str) -> SimulationConfig:
    """Get a preset config by name."""
    if name not in PRESETS:
        raise KeyError(f"Unknown preset: '{name}'. Available: {list(PRESETS.keys())}")
    return PRESETS[name]()


def list_presets() -> list[str]:
    """Return list of available preset names."""
    return list(PRESETS.keys())
