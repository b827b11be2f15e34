"""
API Routes
"""

from .game import router as game_router
from .opponents import router as opponents_router
from .stats import router as stats_router

__all__ = ['game_router', 'opponents_router', 'stats_router']
