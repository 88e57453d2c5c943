"""
Shared test configuration.

Provides a small, seeded config and clears TECHTREE_* variables so that a
developer's .env cannot change API behaviour under test.
"""

import os

import pytest

from techtree.core.config import SimulationConfig


@pytest.fixture(autouse=True, scope="session")
def _isolate_env():
    saved = {k: v for k, v in os.environ.items() if k.startswith("TECHTREE_")}
    for k in saved:
        os.environ.pop(k)
    yield
    os.environ.update(saved)


@pytest.fixture
def small_config() -> SimulationConfig:
    return SimulationConfig(
        num_agents=30, p_innovation=0.05, network_externality_factor=0.2,
        ticks_to_run=25, random_seed=42,
    )
