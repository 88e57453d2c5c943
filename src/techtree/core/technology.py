"""
Technology graph store.

Technologies and derivation edges live in an append-only arena: a dense
list indexed by monotonically increasing integer ids. Edges are directed
parent -> child, but the graph also keeps undirected adjacency lists
because routing (hop distance) ignores direction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Iterator

if TYPE_CHECKING:
    from techtree.core.agent import Agent


class InvariantViolation(AssertionError):
    """A model invariant no longer holds. Always a programming defect."""


@dataclass
class Technology:
    """A node of the derivation graph."""

    id: int
    quality_level: int
    parent_ids: tuple[int, ...] = ()
    created_tick: int = 0
    adopter_count: int = 0

    @property
    def is_seed(self) -> bool:
        return not self.parent_ids

    @property
    def is_recombination(self) -> bool:
        return len(self.parent_ids) > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "quality_level": self.quality_level,
            "parent_ids": list(self.parent_ids),
            "created_tick": self.created_tick,
            "adopter_count": self.adopter_count,
        }


@dataclass(frozen=True)
class DerivationEdge:
    """Records that ``parent_id`` contributed to the creation of ``child_id``."""

    parent_id: int
    child_id: int


@dataclass
class TechnologyGraph:
    """
    Append-only arena of technologies and derivation edges.

    ``version`` increments on every structural mutation so that derived
    data (e.g. cached hop distances) can detect a grown graph.
    """

    technologies: list[Technology] = field(default_factory=list)
    edges: list[DerivationEdge] = field(default_factory=list)
    version: int = 0
    _adjacency: list[list[int]] = field(default_factory=list, repr=False)
    _children: list[list[int]] = field(default_factory=list, repr=False)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def with_seed(cls, base_quality: int = 0) -> TechnologyGraph:
        """Create a graph holding only the seed technology."""
        graph = cls()
        graph._append(Technology(id=0, quality_level=base_quality))
        return graph

    def _append(self, tech: Technology) -> Technology:
        self.technologies.append(tech)
        self._adjacency.append([])
        self._children.append([])
        self.version += 1
        return tech

    def create_technology(
        self, parent_ids: Iterable[int], tick: int = 0,
    ) -> Technology:
        """
        Derive a new technology from one or more existing parents.

        Quality is one above the best parent. One edge is added from
        every parent to the new node. Duplicate parent ids are collapsed,
        keeping first-appearance order.
        """
        parents = tuple(dict.fromkeys(parent_ids))
        if not parents:
            raise InvariantViolation("A derived technology needs at least one parent")
        for pid in parents:
            if not self.has(pid):
                raise InvariantViolation(f"Unknown parent technology {pid}")

        quality = 1 + max(self.technologies[pid].quality_level for pid in parents)
        tech = self._append(Technology(
            id=len(self.technologies),
            quality_level=quality,
            parent_ids=parents,
            created_tick=tick,
        ))
        for pid in parents:
            self.edges.append(DerivationEdge(parent_id=pid, child_id=tech.id))
            self._adjacency[pid].append(tech.id)
            self._adjacency[tech.id].append(pid)
            self._children[pid].append(tech.id)
        return tech

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.technologies)

    def __iter__(self) -> Iterator[Technology]:
        return iter(self.technologies)

    def __getitem__(self, tech_id: int) -> Technology:
        return self.technologies[tech_id]

    def has(self, tech_id: int) -> bool:
        return 0 <= tech_id < len(self.technologies)

    def neighbors(self, tech_id: int) -> list[int]:
        """Undirected adjacency: parents and children together."""
        return self._adjacency[tech_id]

    def children_of(self, tech_id: int) -> list[int]:
        return list(self._children[tech_id])

    def parents_of(self, tech_id: int) -> list[int]:
        return list(self.technologies[tech_id].parent_ids)

    def populated(self) -> list[Technology]:
        """Technologies with at least one adopter, in creation order."""
        return [t for t in self.technologies if t.adopter_count > 0]

    def adopter_counts(self) -> list[int]:
        """Adopter count per technology, in creation order."""
        return [t.adopter_count for t in self.technologies]

    # ------------------------------------------------------------------
    # Adoption primitive
    # ------------------------------------------------------------------
    def place(self, agent: Agent, tech_id: int) -> None:
        """Count a freshly created agent on ``tech_id``."""
        agent.current_technology = tech_id
        self.technologies[tech_id].adopter_count += 1

    def transfer(self, agent: Agent, tech_id: int) -> None:
        """Move ``agent`` from its current technology to ``tech_id``."""
        old = self.technologies[agent.current_technology]
        if old.adopter_count <= 0:
            raise InvariantViolation(
                f"Agent {agent.id} is on technology {old.id} with no adopters"
            )
        old.adopter_count -= 1
        agent.current_technology = tech_id
        self.technologies[tech_id].adopter_count += 1

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------
    def is_connected(self) -> bool:
        """True if every technology is reachable from the seed (undirected)."""
        if not self.technologies:
            return True
        seen = {0}
        stack = [0]
        while stack:
            node = stack.pop()
            for nb in self._adjacency[node]:
                if nb not in seen:
                    seen.add(nb)
                    stack.append(nb)
        return len(seen) == len(self.technologies)

    def check_invariants(self, population: list[Agent]) -> None:
        """Raise ``InvariantViolation`` if the model state is inconsistent."""
        total = sum(t.adopter_count for t in self.technologies)
        if total != len(population):
            raise InvariantViolation(
                f"Adopter counts sum to {total}, population is {len(population)}"
            )
        for agent in population:
            if self.technologies[agent.current_technology].adopter_count < 1:
                raise InvariantViolation(
                    f"Agent {agent.id} is on empty technology {agent.current_technology}"
                )
        for tech in self.technologies:
            if tech.parent_ids:
                expected = 1 + max(
                    self.technologies[p].quality_level for p in tech.parent_ids
                )
                if tech.quality_level != expected:
                    raise InvariantViolation(
                        f"Technology {tech.id} has quality {tech.quality_level}, "
                        f"expected {expected}"
                    )
        if not self.is_connected():
            raise InvariantViolation("Derivation graph is disconnected")

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Nodes and edges for external layout/visualization."""
        return {
            "nodes": [t.to_dict() for t in self.technologies],
            "edges": [
                {"source": e.parent_id, "target": e.child_id}
                for e in self.edges
            ],
        }
