"""
Roshambo API Server

FastAPI backend with Socket.IO for real-time round updates.
"""

from .main import app, sio
from .orchestrator import MatchOrchestrator, PlayResult, orchestrator
from .session import GameSession, SessionStore

__all__ = ['app', 'sio', 'MatchOrchestrator', 'PlayResult', 'orchestrator', 'GameSession', 'SessionStore']
