"""
Core agent dataclass.

An agent uses exactly one technology at a time. The technology is held as
an integer handle into the ``TechnologyGraph`` arena, never as a direct
reference, so the population and the graph can grow independently.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Agent:
    """A population member adopting one technology at a time."""

    # === Identity (enumeration order, stable for the run) ===
    id: int

    # === Adoption ===
    current_technology: int

    # === Transient, reset at the start of every tick ===
    is_innovator: bool = False

    # === History ===
    switches: int = 0          # Adoptions made in the decision stage
    innovations: int = 0       # Ticks in which this agent innovated

    def to_dict(self) -> dict[str, int | bool]:
        return {
            "id": self.id,
            "current_technology": self.current_technology,
            "is_innovator": self.is_innovator,
            "switches": self.switches,
            "innovations": self.innovations,
        }
