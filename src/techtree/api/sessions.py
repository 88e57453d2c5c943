"""
Session manager for simulation experiments.

Each session wraps a SimulationEngine, supporting step-by-step execution
from a presentation layer. Sessions are held in memory only.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from techtree.core.config import SimulationConfig
from techtree.core.engine import SimulationEngine
from techtree.core.technology import InvariantViolation

logger = logging.getLogger(__name__)


@dataclass
class SimulationSession:
    """A running or completed simulation session."""

    id: str
    name: str
    config: SimulationConfig
    engine: SimulationEngine
    status: str = "created"  # created | running | paused | completed
    max_ticks: int = 0

    @property
    def current_tick(self) -> int:
        return self.engine.tick


class SessionManager:
    """Manages multiple in-memory simulation sessions."""

    def __init__(self) -> None:
        self.sessions: dict[str, SimulationSession] = {}

    def create_session(
        self,
        config: SimulationConfig | None = None,
        name: str | None = None,
    ) -> SimulationSession:
        """Create a new simulation session. Invalid configs raise ``ValueError``."""
        if config is None:
            config = SimulationConfig()

        session_id = uuid.uuid4().hex[:8]
        engine = SimulationEngine(config)
        session = SimulationSession(
            id=session_id,
            name=name or config.experiment_name,
            config=config,
            engine=engine,
            max_ticks=config.ticks_to_run,
        )
        self.sessions[session_id] = session
        logger.info("Created session %s (%s)", session_id, session.name)
        return session

    def get_session(self, session_id: str) -> SimulationSession:
        """Get a session by ID. Raises KeyError if not found."""
        if session_id not in self.sessions:
            raise KeyError(f"Session '{session_id}' not found")
        return self.sessions[session_id]

    def list_sessions(self) -> list[dict]:
        return [
            {
                "id": s.id,
                "name": s.name,
                "status": s.status,
                "current_tick": s.current_tick,
                "max_ticks": s.max_ticks,
                "num_agents": len(s.engine.population),
            }
            for s in self.sessions.values()
        ]

    def delete_session(self, session_id: str) -> None:
        if session_id not in self.sessions:
            raise KeyError(f"Session '{session_id}' not found")
        del self.sessions[session_id]
        logger.info("Deleted session %s", session_id)

    def step(self, session_id: str, n: int = 1) -> SimulationSession:
        """Advance a session by up to N ticks, honouring the pause tick."""
        session = self.get_session(session_id)
        if session.status == "completed":
            return session

        target = min(session.current_tick + n, session.max_ticks)
        session.status = "running"
        try:
            session.engine.run_until(target)
        except InvariantViolation:
            logger.exception("Invariant violated in session %s", session_id)
            raise
        self._update_status(session)
        return session

    def run(self, session_id: str, ticks: int | None = None) -> SimulationSession:
        """Advance a session to ``max_ticks`` (or by ``ticks``) synchronously."""
        session = self.get_session(session_id)
        remaining = session.max_ticks - session.current_tick
        n = remaining if ticks is None else min(ticks, remaining)
        return self.step(session_id, n)

    def reset_session(self, session_id: str) -> SimulationSession:
        """Re-run setup with the same configuration and seed."""
        session = self.get_session(session_id)
        session.engine.setup()
        session.status = "created"
        return session

    @staticmethod
    def _update_status(session: SimulationSession) -> None:
        if session.current_tick >= session.max_ticks:
            session.status = "completed"
        elif session.engine.is_paused:
            session.status = "paused"
        else:
            session.status = "running"
