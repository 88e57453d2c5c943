"""
FastAPI application factory for the technology co-evolution API.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from techtree.api.sessions import SessionManager
from techtree.api.routers import simulation, metrics, network, experiments

# Load .env — try project root first, then CWD
_project_root = Path(__file__).resolve().parents[3]  # src/techtree/api/app.py → project root
load_dotenv(_project_root / ".env")
load_dotenv(Path.cwd() / ".env")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="Techtree API",
        description="REST API for the technology co-evolution simulation engine",
        version="0.1.0",
    )

    origins = os.environ.get("TECHTREE_CORS_ORIGINS", "*").split(",")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in origins if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.state.session_manager = SessionManager()

    application.include_router(simulation.router, prefix="/api/simulation", tags=["simulation"])
    application.include_router(metrics.router, prefix="/api/metrics", tags=["metrics"])
    application.include_router(network.router, prefix="/api/network", tags=["network"])
    application.include_router(experiments.router, prefix="/api/experiments", tags=["experiments"])

    @application.get("/api/health")
    def health_check():
        return {"status": "ok"}

    return application


app = create_app()
