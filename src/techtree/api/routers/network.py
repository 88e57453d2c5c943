"""Technology derivation graph endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from techtree.core.distance import UNREACHABLE

router = APIRouter()


def _get(request: Request, session_id: str):
    mgr = request.app.state.session_manager
    try:
        return mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")


@router.get("/{session_id}/graph")
def get_technology_graph(
    session_id: str,
    request: Request,
    populated_only: bool = Query(False),
) -> dict[str, Any]:
    """Nodes and derivation edges; layout is left to the client."""
    session = _get(request, session_id)
    graph = session.engine.graph
    data = graph.to_dict()

    if populated_only:
        keep = {t.id for t in graph.populated()}
        data["nodes"] = [n for n in data["nodes"] if n["id"] in keep]
        data["edges"] = [
            e for e in data["edges"]
            if e["source"] in keep and e["target"] in keep
        ]

    data["stats"] = {
        "technology_count": len(graph),
        "edge_count": len(graph.edges),
        "populated_count": len(graph.populated()),
        "recombinant_count": sum(1 for t in graph if t.is_recombination),
        "max_quality": max(t.quality_level for t in graph),
    }
    return data


@router.get("/{session_id}/distances/{tech_id}")
def get_distances(session_id: str, tech_id: int, request: Request) -> dict[str, Any]:
    """Hop distances from one technology to every other (null if unreachable)."""
    session = _get(request, session_id)
    graph = session.engine.graph
    if not graph.has(tech_id):
        raise HTTPException(status_code=404, detail=f"Technology {tech_id} not found")
    row = session.engine.distances.distances_from(tech_id)
    return {
        "source": tech_id,
        "distances": [None if d == UNREACHABLE else int(d) for d in row],
    }
