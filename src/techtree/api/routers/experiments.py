"""Experiment preset endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from techtree.api.schemas import PresetInfo
from techtree.experiment.presets import PRESETS, get_preset

router = APIRouter()


@router.get("/presets", response_model=list[PresetInfo])
def list_presets():
    return [
        {"name": name, "config": factory().to_dict()}
        for name, factory in PRESETS.items()
    ]


@router.get("/presets/{name}", response_model=PresetInfo)
def get_preset_detail(name: str):
    try:
        config = get_preset(name)
    except KeyError:
        raise HTTPException(status_code=400, detail=f"Unknown preset: '{name}'")
    return {"name": name, "config": config.to_dict()}
