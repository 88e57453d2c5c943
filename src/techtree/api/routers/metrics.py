"""Per-tick metrics endpoints."""

from __future__ import annotations

from typing import Any

import numpy as np
from fastapi import APIRouter, HTTPException, Query, Request

from techtree.api.schemas import SummaryResponse, TimeSeriesResponse
from techtree.api.serializers import serialize_metrics, to_python

router = APIRouter()


def _get(request: Request, session_id: str):
    mgr = request.app.state.session_manager
    try:
        return mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")


@router.get("/{session_id}/ticks")
def get_ticks(
    session_id: str,
    request: Request,
    from_tick: int = Query(1, ge=1),
    to_tick: int | None = Query(None, ge=1),
) -> list[dict[str, Any]]:
    session = _get(request, session_id)
    history = session.engine.history
    end = to_tick if to_tick is not None else len(history)
    # Tick numbers start at 1
    return [serialize_metrics(m) for m in history[from_tick - 1:end]]


@router.get("/{session_id}/time-series/{field_name}", response_model=TimeSeriesResponse)
def get_time_series(session_id: str, field_name: str, request: Request):
    session = _get(request, session_id)
    collector = session.engine.collector
    try:
        values = collector.get_time_series(field_name)
    except AttributeError:
        raise HTTPException(status_code=400, detail=f"Unknown metric field: '{field_name}'")

    return {
        "field": field_name,
        "ticks": [m.tick for m in collector.metrics_history],
        "values": [to_python(v) for v in values],
    }


@router.get("/{session_id}/summary", response_model=SummaryResponse)
def get_summary(session_id: str, request: Request):
    session = _get(request, session_id)
    state = session.engine.state
    history = session.engine.history
    base = session.config.base_quality

    sizes = [s for s in state.transition_sizes if s > 0]
    last = history[-1] if history else None
    return {
        "total_ticks": state.tick,
        "total_recombinations": state.cumulative_recombinations,
        "total_transitions": state.cumulative_transitions,
        "mean_transition_size": float(np.mean(sizes)) if sizes else 0.0,
        "mean_entropy": state.cumulative_entropy / state.tick if state.tick else 0.0,
        "final_entropy": last.entropy if last else 0.0,
        "technology_count": len(session.engine.graph),
        "final_mean_quality": last.mean_quality if last else float(base),
        "final_max_quality": last.max_quality if last else base,
    }
