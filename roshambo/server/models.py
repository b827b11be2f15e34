"""
Pydantic Models for Roshambo API

Data transfer objects for the REST API and WebSocket communication.
"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum

from roshambo.engine import DifficultyTier, Move, ProviderKind


# =============================================================================
# Enums
# =============================================================================

class Locale(str, Enum):
    """Languages the commentary is available in."""
    ZH = "zh"
    EN = "en"


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to start a new game."""
    opponent_id: int = Field(description="ID of an enabled opponent")
    player_name: str = Field(default="Player", max_length=50)
    total_rounds: Optional[int] = Field(default=None, ge=1, le=99, description="Defaults to the server setting")


class PlayRoundRequest(BaseModel):
    """Request to play one round."""
    move: Optional[Move] = Field(default=None, description="Player move; ignored when timeout is set")
    timeout: bool = Field(default=False, description="Player ran out of time; a random move is played")
    locale: Locale = Locale.ZH


class ModelConfigRequest(BaseModel):
    """LLM credentials for an opponent or a diagnostic call."""
    provider: ProviderKind = ProviderKind.OPENAI
    host: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None
    api_version: Optional[str] = None


class OpponentCreateRequest(ModelConfigRequest):
    """Request to create an opponent."""
    name: str = Field(min_length=1, max_length=50)
    display_name: str = Field(min_length=1, max_length=50)
    display_name_en: Optional[str] = None
    avatar: Optional[str] = None
    difficulty: DifficultyTier = DifficultyTier.NORMAL
    description: Optional[str] = None
    description_en: Optional[str] = None
    enabled: bool = True
    sort_order: int = 10


class OpponentUpdateRequest(BaseModel):
    """Partial update of an opponent; unset fields are left alone."""
    name: Optional[str] = None
    display_name: Optional[str] = None
    display_name_en: Optional[str] = None
    avatar: Optional[str] = None
    difficulty: Optional[DifficultyTier] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    enabled: Optional[bool] = None
    sort_order: Optional[int] = None
    provider: Optional[ProviderKind] = None
    host: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None
    api_version: Optional[str] = None


# =============================================================================
# Response Models
# =============================================================================

class RoundData(BaseModel):
    """One round as stored."""
    round_number: int
    player_move: Move
    ai_move: Move
    outcome: str
    was_timeout: bool = False
    created_at: float


class SessionData(BaseModel):
    """Session snapshot for API responses."""
    id: str
    opponent_id: int
    player_name: str
    total_rounds: int
    player_wins: int = 0
    ai_wins: int = 0
    draws: int = 0
    status: str
    ai_comment: Optional[str] = None
    created_at: str
    finished_at: Optional[str] = None


class OpponentData(BaseModel):
    """Public opponent data (no credentials)."""
    id: int
    name: str
    display_name: str
    display_name_en: Optional[str] = None
    avatar: Optional[str] = None
    difficulty: DifficultyTier
    description: Optional[str] = None
    description_en: Optional[str] = None
    model: Optional[str] = None
    enabled: bool = True
    sort_order: int = 10
    created_at: str
    updated_at: str


class OpponentAdminData(OpponentData):
    """Opponent data including model credentials."""
    provider: Optional[ProviderKind] = None
    host: Optional[str] = None
    api_key: Optional[str] = None
    api_version: Optional[str] = None


class OpponentListResponse(BaseModel):
    """Response with a list of opponents."""
    opponents: list[OpponentData]
    total: int


class OpponentAdminListResponse(BaseModel):
    """Admin response with a list of opponents."""
    opponents: list[OpponentAdminData]
    total: int


class CreateGameResponse(BaseModel):
    """Response after starting a game."""
    game_id: str
    session: SessionData
    opponent: OpponentData


class GameStateResponse(BaseModel):
    """Session plus its rounds in order."""
    session: SessionData
    rounds: list[RoundData] = Field(default_factory=list)
    opponent: Optional[OpponentData] = None


class RoundResultData(BaseModel):
    """The round just played."""
    number: int
    player_move: Move
    ai_move: Move
    outcome: str
    was_timeout: bool = False
    ai_source: str


class PlayRoundResponse(BaseModel):
    """Response after playing a round."""
    round: RoundResultData
    session: SessionData
    finished: bool
    comment: Optional[str] = None


class ConnectionTestResponse(BaseModel):
    """Result of a model connection test."""
    success: bool
    message: str = ""
    model: Optional[str] = None


class GeneratedProfileResponse(BaseModel):
    """Opponent texts written by a model."""
    display_name: str = ""
    display_name_en: str = ""
    description: str = ""
    description_en: str = ""


class TotalStatsData(BaseModel):
    """Totals over finished games."""
    total_player_wins: int = 0
    total_ai_wins: int = 0
    total_draws: int = 0
    total_games: int = 0


class OpponentStatsData(BaseModel):
    """Finished-game totals against one opponent."""
    id: int
    name: str
    name_en: Optional[str] = None
    avatar: Optional[str] = None
    difficulty: DifficultyTier
    games_played: int = 0
    player_wins: int = 0
    ai_wins: int = 0
    draws: int = 0
    player_win_rate: float = 0.0


class StatsResponse(BaseModel):
    """Aggregated statistics."""
    total: TotalStatsData
    by_opponent: list[OpponentStatsData] = Field(default_factory=list)


# =============================================================================
# WebSocket Event Models
# =============================================================================

class WSJoinGame(BaseModel):
    """WebSocket event to join a game room."""
    game_id: str


class WSPlayRound(BaseModel):
    """WebSocket event to play a round."""
    game_id: str
    move: Optional[Move] = None
    timeout: bool = False
    locale: Locale = Locale.ZH


class WSRoundResult(BaseModel):
    """WebSocket event broadcast after a round."""
    event: str = "round_result"
    game_id: str
    data: PlayRoundResponse


class WSError(BaseModel):
    """WebSocket error event."""
    event: str = "error"
    message: str
    code: Optional[str] = None
