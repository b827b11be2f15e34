"""
Game Session Management

Stores game sessions and their rounds, and serializes play on each session.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import logging
import secrets

from roshambo.engine import RoundRecord
from roshambo.errors import SessionAlreadyFinished, SessionNotFound

logger = logging.getLogger(__name__)

TALLY_FIELDS = ("player_wins", "ai_wins", "draws")


def generate_id() -> str:
    """Generate a short unique ID (8 hex chars)."""
    return secrets.token_hex(4)


class SessionStatus(str, Enum):
    """Session lifecycle. PLAYING -> FINISHED happens once."""
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass
class GameSession:
    """
    A single best-of-N game against one opponent.

    Tallies always equal the aggregated outcomes of `rounds`.
    """
    id: str
    opponent_id: int
    player_name: str = "Player"
    total_rounds: int = 5

    # Running tallies
    player_wins: int = 0
    ai_wins: int = 0
    draws: int = 0

    status: SessionStatus = SessionStatus.PLAYING
    ai_comment: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    finished_at: Optional[str] = None

    rounds: list[RoundRecord] = field(default_factory=list)

    @property
    def is_finished(self) -> bool:
        return self.status == SessionStatus.FINISHED

    @property
    def rounds_played(self) -> int:
        return len(self.rounds)

    def snapshot(self) -> dict:
        """Serializable view of the session (without rounds)."""
        return {
            "id": self.id,
            "opponent_id": self.opponent_id,
            "player_name": self.player_name,
            "total_rounds": self.total_rounds,
            "player_wins": self.player_wins,
            "ai_wins": self.ai_wins,
            "draws": self.draws,
            "status": self.status.value,
            "ai_comment": self.ai_comment,
            "created_at": self.created_at,
            "finished_at": self.finished_at,
        }


class SessionStore:
    """
    In-memory store for all game sessions.

    Writers must hold `lock(session_id)` so two requests for the same
    session never see the same round number.
    """

    def __init__(self):
        self.sessions: dict[str, GameSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock = asyncio.Lock()

    async def create_session(
        self,
        opponent_id: int,
        player_name: str = "Player",
        total_rounds: int = 5
    ) -> GameSession:
        """Create a new session with zero rounds."""
        if total_rounds < 1:
            raise ValueError(f"total_rounds must be positive, got {total_rounds}")

        async with self._lock:
            session_id = generate_id()
            while session_id in self.sessions:
                session_id = generate_id()

            session = GameSession(
                id=session_id,
                opponent_id=opponent_id,
                player_name=player_name,
                total_rounds=total_rounds
            )

            self.sessions[session_id] = session
            self._locks[session_id] = asyncio.Lock()
            logger.info(
                "Created session %s vs opponent %s (%d rounds)",
                session_id, opponent_id, total_rounds
            )
            return session

    def get_session(self, session_id: str) -> Optional[GameSession]:
        """Get a session by ID."""
        return self.sessions.get(session_id)

    def _require(self, session_id: str) -> GameSession:
        session = self.sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def lock(self, session_id: str) -> asyncio.Lock:
        """Per-session lock serializing play requests."""
        self._require(session_id)
        return self._locks.setdefault(session_id, asyncio.Lock())

    def get_history(self, session_id: str) -> list[RoundRecord]:
        """Rounds played so far, ordered by round number."""
        return list(self._require(session_id).rounds)

    def append_round(self, session_id: str, record: RoundRecord) -> None:
        """
        Append the next round.

        Raises:
            SessionAlreadyFinished: If the session is finished
            ValueError: If the round number is not the next one
        """
        session = self._require(session_id)
        if session.is_finished:
            raise SessionAlreadyFinished(session_id)

        expected = session.rounds_played + 1
        if record.round_number != expected:
            raise ValueError(
                f"Session {session_id} expects round {expected}, got {record.round_number}"
            )
        session.rounds.append(record)

    def increment_tally(self, session_id: str, field_name: str) -> None:
        """Add one to player_wins, ai_wins or draws."""
        if field_name not in TALLY_FIELDS:
            raise ValueError(f"Unknown tally: {field_name}")
        session = self._require(session_id)
        setattr(session, field_name, getattr(session, field_name) + 1)

    def finalize_session(self, session_id: str, comment: str) -> GameSession:
        """
        Mark the session finished and attach the closing remark.

        Raises:
            SessionAlreadyFinished: If called a second time
        """
        session = self._require(session_id)
        if session.is_finished:
            raise SessionAlreadyFinished(session_id)

        session.status = SessionStatus.FINISHED
        session.ai_comment = comment
        session.finished_at = datetime.now().isoformat()
        logger.info(
            "Session %s finished %d-%d-%d",
            session_id, session.player_wins, session.ai_wins, session.draws
        )
        return session

    def list_sessions(self, status: Optional[SessionStatus] = None) -> list[GameSession]:
        """All sessions, optionally filtered by status."""
        return [
            s for s in self.sessions.values()
            if status is None or s.status == status
        ]

    def count_for_opponent(self, opponent_id: int) -> int:
        """Number of sessions (any status) played against an opponent."""
        return sum(1 for s in self.sessions.values() if s.opponent_id == opponent_id)

    async def remove_session(self, session_id: str) -> None:
        """Remove a session."""
        async with self._lock:
            self.sessions.pop(session_id, None)
            self._locks.pop(session_id, None)


# Global session store instance
session_store = SessionStore()
