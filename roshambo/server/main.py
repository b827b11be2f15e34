"""
Roshambo API Server

FastAPI application with Socket.IO for real-time round updates.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
import socketio

from roshambo import __version__
from roshambo.errors import RoshamboError
from .config import game_config
from .models import WSError, WSJoinGame, WSPlayRound, WSRoundResult
from .orchestrator import orchestrator
from .routes import game_router, opponents_router, stats_router
from .routes.game import build_play_response

logger = logging.getLogger(__name__)


def game_room(game_id: str) -> str:
    return f"game_{game_id}"


# =============================================================================
# Socket.IO Setup
# =============================================================================

# Create Socket.IO server
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*',
    logger=False,
    engineio_logger=False
)


@sio.event
async def connect(sid, environ):
    """Handle client connection."""
    logger.info("Client connected: %s", sid)
    await sio.emit('connected', {'sid': sid}, to=sid)


@sio.event
async def disconnect(sid):
    """Handle client disconnection."""
    logger.info("Client disconnected: %s", sid)


@sio.event
async def join_game(sid, data):
    """
    Join a game room.

    Expected data: { game_id: string }
    """
    try:
        request = WSJoinGame(**(data or {}))
    except ValidationError:
        await sio.emit('error', WSError(message='game_id required').model_dump(), to=sid)
        return

    session = orchestrator.store.get_session(request.game_id)
    if not session:
        await sio.emit('error', WSError(message='Game not found', code='SessionNotFound').model_dump(), to=sid)
        return

    await sio.enter_room(sid, game_room(request.game_id))

    await sio.emit('game_state', {
        'session': session.snapshot(),
        'rounds': [r.to_dict() for r in orchestrator.store.get_history(request.game_id)],
    }, to=sid)


@sio.event
async def leave_game(sid, data):
    """
    Leave a game room.

    Expected data: { game_id: string }
    """
    game_id = (data or {}).get('game_id')
    if game_id:
        await sio.leave_room(sid, game_room(game_id))


@sio.event
async def play_round(sid, data):
    """
    Play a round via WebSocket and broadcast the result to the game room.

    Expected data: { game_id: string, move?: string, timeout?: bool, locale?: string }
    """
    try:
        request = WSPlayRound(**(data or {}))
    except ValidationError as e:
        error = WSError(message=f'Invalid play request: {e.error_count()} errors', code='invalid_request')
        await sio.emit('error', error.model_dump(), to=sid)
        return

    try:
        result = await orchestrator.play_round(
            request.game_id,
            move=request.move,
            timeout=request.timeout,
            locale=request.locale.value,
        )
    except RoshamboError as e:
        error = WSError(message=str(e), code=type(e).__name__)
        await sio.emit('error', error.model_dump(), to=sid)
        return

    event = WSRoundResult(game_id=request.game_id, data=build_play_response(result))
    await sio.emit('round_result', event.model_dump(mode='json'), room=game_room(request.game_id))


# =============================================================================
# FastAPI Application
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Roshambo API Server starting...")
    if game_config.seed_opponents:
        added = orchestrator.registry.seed_defaults()
        if added:
            logger.info("Seeded %d default opponents", added)
    yield
    # Shutdown
    logger.info("Roshambo API Server shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Roshambo API",
    description="Rock-Paper-Scissors against configurable AI opponents",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict to your frontend URL
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(game_router, prefix="/api")
app.include_router(opponents_router, prefix="/api")
app.include_router(stats_router, prefix="/api")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "roshambo-api"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Roshambo API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Mount Socket.IO
socket_app = socketio.ASGIApp(sio, app)


# For running with uvicorn directly
def create_app():
    """Create the ASGI application."""
    return socket_app


def main():
    """Run the server with uvicorn."""
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "roshambo.server.main:socket_app",
        host="0.0.0.0",
        port=8000,
        reload=False
    )


# Main entry point
if __name__ == "__main__":
    main()
