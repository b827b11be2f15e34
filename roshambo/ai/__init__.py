"""
Roshambo AI System

Decides the AI's moves and closing remarks.

- Local engine: psychology (normal) or chaos strategies, no network
- External adapter: LLM-backed decisions with local fallback
"""

from .engine import AIEngine, decide
from .commentary import CommentTone, classify_tone, generate_comment
from .adapter import ExternalModelAdapter, MoveDecision, parse_move
from .strategies import AIStrategy, PsychologyStrategy, ChaosStrategy

# LLM module available for advanced usage
from . import llm

__all__ = [
    # Core
    'AIEngine',
    'decide',
    # Commentary
    'CommentTone',
    'classify_tone',
    'generate_comment',
    # External model
    'ExternalModelAdapter',
    'MoveDecision',
    'parse_move',
    # Strategies
    'AIStrategy',
    'PsychologyStrategy',
    'ChaosStrategy',
    # Submodules
    'llm',
]
