"""
Innovation engine — stochastic creation of new technologies.

Each tick a Bernoulli draw per agent marks the innovators. The distinct
technologies they occupy are partitioned by the recombination policy and
every partition group yields exactly one new technology, one quality
level above its best parent. The group's innovators adopt it at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from techtree.core.technology import TechnologyGraph

if TYPE_CHECKING:
    from techtree.core.agent import Agent

logger = logging.getLogger(__name__)


@dataclass
class InnovationOutcome:
    """What one innovation stage did."""
    innovators: int = 0
    recombinations: int = 0
    created: list[int] = field(default_factory=list)


def sample_innovators(
    population: list[Agent], p_innovation: float, rng: np.random.Generator,
) -> list[Agent]:
    """Mark innovators with one draw per agent, in enumeration order."""
    draws = rng.random(len(population))
    innovators: list[Agent] = []
    for agent, draw in zip(population, draws):
        agent.is_innovator = bool(draw < p_innovation)
        if agent.is_innovator:
            innovators.append(agent)
    return innovators


def partition_technologies(
    tech_ids: list[int], recombination_enabled: bool,
) -> list[list[int]]:
    """One group holding everything, or one group per technology."""
    if not tech_ids:
        return []
    if recombination_enabled:
        return [list(tech_ids)]
    return [[tid] for tid in tech_ids]


def run_innovation_stage(
    population: list[Agent],
    graph: TechnologyGraph,
    recombination_enabled: bool,
    p_innovation: float,
    rng: np.random.Generator,
    tick: int = 0,
) -> InnovationOutcome:
    innovators = sample_innovators(population, p_innovation, rng)
    outcome = InnovationOutcome(innovators=len(innovators))
    if not innovators:
        return outcome

    # Distinct occupied technologies, in order of first appearance
    occupied = list(dict.fromkeys(a.current_technology for a in innovators))

    for group in partition_technologies(occupied, recombination_enabled):
        members = set(group)
        movers = [a for a in innovators if a.current_technology in members]
        tech = graph.create_technology(group, tick=tick)
        outcome.created.append(tech.id)
        for agent in movers:
            graph.transfer(agent, tech.id)
            agent.innovations += 1
        if tech.is_recombination:
            outcome.recombinations += 1
            logger.debug(
                "Tick %d: technology %d recombines %s (quality %d)",
                tick, tech.id, list(tech.parent_ids), tech.quality_level,
            )

    return outcome
