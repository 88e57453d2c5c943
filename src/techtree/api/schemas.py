"""
Pydantic models for API request/response validation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# === Simulation ===

class CreateSessionRequest(BaseModel):
    config: dict[str, Any] | None = None
    preset: str | None = None
    name: str | None = None


class RunRequest(BaseModel):
    ticks: int | None = Field(None, ge=0)


class StepRequest(BaseModel):
    n: int = Field(1, ge=1)


class SessionSummary(BaseModel):
    id: str
    name: str
    status: str
    current_tick: int
    max_ticks: int
    num_agents: int


class SessionResponse(SessionSummary):
    config: dict[str, Any]
    latest: dict[str, Any] | None = None


# === Metrics ===

class SummaryResponse(BaseModel):
    total_ticks: int
    total_recombinations: int
    total_transitions: int
    mean_transition_size: float
    mean_entropy: float
    final_entropy: float
    technology_count: int
    final_mean_quality: float
    final_max_quality: int


class TimeSeriesResponse(BaseModel):
    field: str
    ticks: list[int]
    values: list[Any]


# === Experiments ===

class PresetInfo(BaseModel):
    name: str
    config: dict[str, Any]
