"""
Serializers for converting simulation objects to JSON-safe dicts.

Handles numpy scalars and the dataclasses of the core package.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from techtree.metrics.collector import TickMetrics

if TYPE_CHECKING:
    from techtree.api.sessions import SimulationSession


def to_python(v: Any) -> Any:
    """Convert numpy scalars/arrays (possibly nested in lists) to Python values."""
    if isinstance(v, np.ndarray):
        return v.tolist()
    if isinstance(v, (np.integer, np.floating, np.bool_)):
        return v.item()
    if isinstance(v, list):
        return [to_python(x) for x in v]
    return v


def serialize_metrics(m: TickMetrics) -> dict[str, Any]:
    """Per-tick observables, floats rounded for display."""
    d = {k: to_python(v) for k, v in m.to_dict().items()}
    for key in ("mean_quality", "min_utility", "mean_utility", "max_utility",
                "entropy", "cumulative_entropy"):
        d[key] = round(float(d[key]), 6)
    return d


def serialize_session(session: SimulationSession) -> dict[str, Any]:
    history = session.engine.history
    return {
        "id": session.id,
        "name": session.name,
        "status": session.status,
        "current_tick": session.current_tick,
        "max_ticks": session.max_ticks,
        "num_agents": len(session.engine.population),
        "config": session.config.to_dict(),
        "latest": serialize_metrics(history[-1]) if history else None,
    }
