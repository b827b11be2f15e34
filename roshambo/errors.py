"""
Roshambo Errors

Typed exceptions raised by the match engine and its collaborators.
Routes convert these to HTTP errors; gameplay code absorbs UpstreamFailure.
"""

from typing import Optional


class RoshamboError(Exception):
    """Base class for all domain errors."""


# === Caller input =============================================================

class SessionNotFound(RoshamboError):
    """No game session exists with the requested id."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Game session not found: {session_id}")


class SessionAlreadyFinished(RoshamboError):
    """The session is finished and accepts no more rounds."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Game session already finished: {session_id}")


class RoundCountExceeded(RoshamboError):
    """The next round number would exceed the session's total rounds."""

    def __init__(self, session_id: str, round_number: int, total_rounds: int):
        self.session_id = session_id
        self.round_number = round_number
        self.total_rounds = total_rounds
        super().__init__(
            f"Round {round_number} exceeds {total_rounds} rounds for session {session_id}"
        )


class InvalidMoveRequest(RoshamboError):
    """A play request carried neither a move nor the timeout flag."""


class OpponentNotFound(RoshamboError):
    """No enabled opponent exists with the requested id."""

    def __init__(self, opponent_id: int):
        self.opponent_id = opponent_id
        super().__init__(f"Opponent not found or disabled: {opponent_id}")


# === Configuration ============================================================

class ConfigInvalid(RoshamboError):
    """Opponent or model configuration is unusable (missing host/key/model, unknown difficulty)."""


# === External model ===========================================================

class UpstreamFailure(RoshamboError):
    """
    The external model could not produce a usable answer.

    Covers network errors, timeouts, auth/rate-limit rejections,
    non-2xx responses and unparseable payloads.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
