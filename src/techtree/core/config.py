"""
Master configuration for the technology co-evolution sandbox.

ALL tunable parameters live here. Nothing in the simulation is hardcoded.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

TIE_BREAK_POLICIES = ("lowest_id", "newest", "random")


def _require_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _require_real(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")


@dataclass
class SimulationConfig:
    """
    Master configuration — every parameter of a run.

    Use ``to_dict()`` / ``from_dict()`` for serialization and comparison.
    ``validate()`` is called by the engine before setup; invalid values
    fail fast with ``ValueError``.
    """

    # === Experiment identity ===
    experiment_name: str = "default"
    random_seed: int | None = None

    # === Population ===
    num_agents: int = 100

    # === Innovation ===
    p_innovation: float = 0.01          # Per-agent, per-tick Bernoulli probability
    recombination_enabled: bool = False  # One merged technology vs one per parent
    base_quality: int = 0               # Quality level of the seed technology

    # === Adoption ===
    network_externality_factor: float = 0.1  # Utility added per current adopter
    tie_break: str = "lowest_id"             # 'lowest_id', 'newest', 'random'

    # === Clock ===
    ticks_to_run: int = 100
    pause_at_tick: int | None = None

    # === Diagnostics ===
    check_invariants: bool = True

    def validate(self) -> None:
        """Raise ``ValueError`` if any parameter has the wrong type or is out of range."""
        _require_int("num_agents", self.num_agents)
        if self.num_agents <= 0:
            raise ValueError(f"num_agents must be positive, got {self.num_agents}")
        _require_real("p_innovation", self.p_innovation)
        if not 0.0 <= self.p_innovation <= 1.0:
            raise ValueError(
                f"p_innovation must be within [0, 1], got {self.p_innovation}"
            )
        _require_real("network_externality_factor", self.network_externality_factor)
        if not self.network_externality_factor >= 0:
            raise ValueError(
                "network_externality_factor must be non-negative, "
                f"got {self.network_externality_factor}"
            )
        _require_int("base_quality", self.base_quality)
        if self.base_quality < 0:
            raise ValueError(f"base_quality must be non-negative, got {self.base_quality}")
        _require_int("ticks_to_run", self.ticks_to_run)
        if self.ticks_to_run < 0:
            raise ValueError(f"ticks_to_run must be non-negative, got {self.ticks_to_run}")
        if self.pause_at_tick is not None:
            _require_int("pause_at_tick", self.pause_at_tick)
            if self.pause_at_tick < 0:
                raise ValueError(
                    f"pause_at_tick must be non-negative or None, got {self.pause_at_tick}"
                )
        if self.tie_break not in TIE_BREAK_POLICIES:
            raise ValueError(
                f"Unknown tie_break '{self.tie_break}'. Choose from: {list(TIE_BREAK_POLICIES)}"
            )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SimulationConfig:
        """Deserialize from a dict. Unknown keys raise ``TypeError``."""
        return cls(**{k: v for k, v in d.items() if not k.startswith("_")})

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_json(cls, s: str) -> SimulationConfig:
        return cls.from_dict(json.loads(s))

    def diff(self, other: SimulationConfig) -> dict[str, tuple[Any, Any]]:
        """Return parameters that differ between two configs."""
        diffs: dict[str, tuple[Any, Any]] = {}
        for k in self.to_dict():
            v1 = getattr(self, k)
            v2 = getattr(other, k)
            if v1 != v2:
                diffs[k] = (v1, v2)
        return diffs
