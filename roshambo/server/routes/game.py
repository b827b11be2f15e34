"""
Game Routes

Endpoints for starting games and playing rounds.
"""

from fastapi import APIRouter, HTTPException

from roshambo.errors import RoshamboError
from ..models import (
    CreateGameRequest, CreateGameResponse,
    PlayRoundRequest, PlayRoundResponse,
    GameStateResponse, OpponentData, RoundData, SessionData, RoundResultData,
)
from ..orchestrator import PlayResult, orchestrator
from .errors import to_http_exception

router = APIRouter(prefix="/game", tags=["game"])


def build_play_response(result: PlayResult) -> PlayRoundResponse:
    """Convert an orchestrator result to the API shape."""
    return PlayRoundResponse(
        round=RoundResultData(
            number=result.round.number,
            player_move=result.round.player_move,
            ai_move=result.round.ai_move,
            outcome=result.round.outcome.value,
            was_timeout=result.round.was_timeout,
            ai_source=result.round.ai_source,
        ),
        session=SessionData(**result.session),
        finished=result.finished,
        comment=result.comment,
    )


@router.post("", response_model=CreateGameResponse)
async def create_game(request: CreateGameRequest) -> CreateGameResponse:
    """
    Start a new game against an enabled opponent.

    Returns the game id and the empty session.
    """
    try:
        session = await orchestrator.create_session(
            opponent_id=request.opponent_id,
            player_name=request.player_name,
            total_rounds=request.total_rounds,
        )
    except RoshamboError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    profile = orchestrator.registry.get(session.opponent_id)
    return CreateGameResponse(
        game_id=session.id,
        session=SessionData(**session.snapshot()),
        opponent=OpponentData(**profile.to_dict()),
    )


@router.get("/{game_id}", response_model=GameStateResponse)
async def get_game(game_id: str) -> GameStateResponse:
    """Get a game with its rounds in order."""
    session = orchestrator.store.get_session(game_id)
    if not session:
        raise HTTPException(status_code=404, detail="Game not found")

    profile = orchestrator.registry.get(session.opponent_id)
    return GameStateResponse(
        session=SessionData(**session.snapshot()),
        rounds=[RoundData(**r.to_dict()) for r in orchestrator.store.get_history(game_id)],
        opponent=OpponentData(**profile.to_dict()) if profile else None,
    )


@router.post("/{game_id}/play", response_model=PlayRoundResponse)
async def play_round(game_id: str, request: PlayRoundRequest) -> PlayRoundResponse:
    """
    Play one round.

    Send either a move or timeout=true. The response carries the closing
    comment when this was the last round.
    """
    try:
        result = await orchestrator.play_round(
            game_id,
            move=request.move,
            timeout=request.timeout,
            locale=request.locale.value,
        )
    except RoshamboError as e:
        raise to_http_exception(e)

    return build_play_response(result)
