"""
Route Error Mapping

Converts domain errors to HTTP errors at the route boundary.
"""

from fastapi import HTTPException

from roshambo.errors import (
    ConfigInvalid, InvalidMoveRequest, OpponentNotFound, RoshamboError,
    RoundCountExceeded, SessionAlreadyFinished, SessionNotFound, UpstreamFailure,
)

_STATUS_CODES = (
    (SessionNotFound, 404),
    (OpponentNotFound, 404),
    (SessionAlreadyFinished, 400),
    (RoundCountExceeded, 400),
    (InvalidMoveRequest, 400),
    (ConfigInvalid, 400),
    (UpstreamFailure, 502),
)


def to_http_exception(error: RoshamboError) -> HTTPException:
    """HTTPException for a domain error; unknown errors are a 500."""
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
