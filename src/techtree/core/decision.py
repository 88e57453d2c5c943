"""
Scoring and adoption decision protocol.

  utility(u)        = quality_level(u) + adopter_count(u) * network_externality_factor
  score(t -> u)     = utility(u) - hops(t, u)

The decision stage runs in two explicit passes:

1. Snapshot — for every populated technology ``t`` compute an immutable
   ``ScoreVector`` over all technologies from the adopter counts as they
   stand before anyone moves.
2. Decide — each non-innovating agent, in enumeration order, reads the
   vector of its own technology. Its own score is read live, so moves
   already applied in this pass are visible to the comparison but not to
   the vectors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from techtree.core.distance import DistanceEngine
from techtree.core.technology import InvariantViolation, Technology, TechnologyGraph

if TYPE_CHECKING:
    from techtree.core.agent import Agent
    from techtree.core.config import SimulationConfig


def utility(tech: Technology, network_externality_factor: float) -> float:
    """Quality plus adopter-scaled network externality, read from current state."""
    return tech.quality_level + tech.adopter_count * network_externality_factor


@dataclass(frozen=True)
class ScoreVector:
    """Scores of every technology as seen from ``source_id``."""
    source_id: int
    scores: np.ndarray

    @property
    def best(self) -> float:
        return float(self.scores.max())

    @property
    def candidates(self) -> np.ndarray:
        """Ids achieving the maximum score, ascending."""
        return np.flatnonzero(self.scores == self.scores.max())

    def score_of(self, tech_id: int) -> float:
        return float(self.scores[tech_id])


@dataclass
class AdoptionDecision:
    """One applied switch, kept for explainability and tests."""
    agent_id: int
    from_technology: int
    to_technology: int
    own_score: float
    best_score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "from_technology": self.from_technology,
            "to_technology": self.to_technology,
            "own_score": self.own_score,
            "best_score": self.best_score,
        }


@dataclass
class DecisionOutcome:
    """Result of one decision stage."""
    snapshots: dict[int, ScoreVector]
    decisions: list[AdoptionDecision] = field(default_factory=list)

    @property
    def switches(self) -> int:
        return len(self.decisions)


class AdoptionModel:
    """
    Myopic, network-externality-sensitive adoption.

    An agent whose own technology is among the maximal candidates always
    stays; the configured policy only decides between other technologies.
    Among equally scored best technologies the policy is ``lowest_id``
    (oldest), ``newest`` (highest id) or ``random`` (a draw from the shared
    generator, taken only when there is a real tie).
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.factor = config.network_externality_factor
        self.tie_break = config.tie_break

    def utilities(self, graph: TechnologyGraph) -> np.ndarray:
        """Utility of every technology, in id order."""
        quality = np.fromiter((t.quality_level for t in graph), dtype=np.float64, count=len(graph))
        counts = np.fromiter((t.adopter_count for t in graph), dtype=np.float64, count=len(graph))
        return quality + counts * self.factor

    def snapshot_scores(
        self, graph: TechnologyGraph, distances: DistanceEngine,
    ) -> dict[int, ScoreVector]:
        """Score vectors for every populated technology, from current counts."""
        utils = self.utilities(graph)
        snapshots: dict[int, ScoreVector] = {}
        for tech in graph.populated():
            hops = distances.distances_from(tech.id)
            scores = utils - hops
            scores.setflags(write=False)
            snapshots[tech.id] = ScoreVector(source_id=tech.id, scores=scores)
        return snapshots

    def choose(self, vector: ScoreVector, rng: np.random.Generator) -> int:
        """Pick one of the maximal technologies according to the tie-break policy."""
        candidates = vector.candidates
        if len(candidates) == 1 or self.tie_break == "lowest_id":
            return int(candidates[0])
        if self.tie_break == "newest":
            return int(candidates[-1])
        return int(rng.choice(candidates))

    def run_decision_stage(
        self,
        population: list[Agent],
        graph: TechnologyGraph,
        distances: DistanceEngine,
        rng: np.random.Generator,
    ) -> DecisionOutcome:
        # Pass 1: every snapshot before any agent moves
        snapshots = self.snapshot_scores(graph, distances)
        outcome = DecisionOutcome(snapshots=snapshots)

        # Pass 2: decisions in enumeration order
        for agent in population:
            if agent.is_innovator:
                continue
            own_id = agent.current_technology
            vector = snapshots.get(own_id)
            if vector is None:
                raise InvariantViolation(
                    f"Agent {agent.id} is on technology {own_id}, "
                    "which had no adopters at snapshot time"
                )
            best = vector.best
            own_score = utility(graph[own_id], self.factor)
            if own_score >= best or vector.score_of(own_id) == best:
                continue
            target = self.choose(vector, rng)
            graph.transfer(agent, target)
            agent.switches += 1
            outcome.decisions.append(AdoptionDecision(
                agent_id=agent.id,
                from_technology=own_id,
                to_technology=target,
                own_score=own_score,
                best_score=best,
            ))
        return outcome
