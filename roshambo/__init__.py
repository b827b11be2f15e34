"""
Roshambo

Rock-Paper-Scissors against a configurable AI opponent.
"""

__version__ = "1.0.0"
