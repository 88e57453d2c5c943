"""
Explicit simulation state owned by the driver.

Cumulative counters live here rather than in module globals so that any
number of engines can run side by side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SimulationState:
    """Running aggregates across ticks."""
    tick: int = 0
    cumulative_recombinations: int = 0
    cumulative_transitions: int = 0
    cumulative_entropy: float = 0.0
    last_transition_quality_level: int = -1
    transition_sizes: list[int] = field(default_factory=list)

    @classmethod
    def initial(cls, base_quality: int = 0) -> SimulationState:
        # Sentinel strictly below the lowest attainable quality level
        return cls(last_transition_quality_level=base_quality - 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "cumulative_recombinations": self.cumulative_recombinations,
            "cumulative_transitions": self.cumulative_transitions,
            "cumulative_entropy": self.cumulative_entropy,
            "last_transition_quality_level": self.last_transition_quality_level,
            "transition_sizes": list(self.transition_sizes),
        }
