"""
Server Services
"""

from .opponent_registry import OpponentProfile, OpponentRegistry, opponent_registry
from .stats import compute_stats

__all__ = ['OpponentProfile', 'OpponentRegistry', 'opponent_registry', 'compute_stats']
