"""
Opponent Routes

Public opponent listing, admin CRUD and model diagnostics.
"""

from fastapi import APIRouter, HTTPException
import logging

from roshambo.ai import ExternalModelAdapter
from roshambo.ai.llm import ExternalModelConfig
from roshambo.ai.llm.config import DEFAULT_AZURE_API_VERSION
from roshambo.errors import RoshamboError
from ..models import (
    ModelConfigRequest, OpponentCreateRequest, OpponentUpdateRequest,
    OpponentData, OpponentAdminData, OpponentListResponse, OpponentAdminListResponse,
    ConnectionTestResponse, GeneratedProfileResponse,
)
from ..orchestrator import orchestrator
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/opponents", tags=["opponents"])


def _model_config(request: ModelConfigRequest) -> ExternalModelConfig:
    return ExternalModelConfig(
        provider=request.provider,
        host=request.host,
        api_key=request.api_key,
        model=request.model,
        api_version=request.api_version or DEFAULT_AZURE_API_VERSION,
    )


def _diagnostic_adapter(request: ModelConfigRequest) -> ExternalModelAdapter:
    """Adapter for an unsaved config. Host, key and model are all required."""
    config = _model_config(request)
    config.validate()
    return ExternalModelAdapter(
        config,
        provider=orchestrator.provider_factory(config),
        llm_config=orchestrator.llm_config,
    )


# =============================================================================
# Public
# =============================================================================

@router.get("", response_model=OpponentListResponse)
async def list_opponents() -> OpponentListResponse:
    """List enabled opponents. Credentials are never included."""
    profiles = orchestrator.registry.list_opponents(enabled_only=True)
    return OpponentListResponse(
        opponents=[OpponentData(**p.to_dict()) for p in profiles],
        total=len(profiles),
    )


# =============================================================================
# Admin
# =============================================================================

@router.get("/admin", response_model=OpponentAdminListResponse)
async def list_all_opponents() -> OpponentAdminListResponse:
    """List every opponent, including disabled ones and their credentials."""
    profiles = orchestrator.registry.list_opponents()
    return OpponentAdminListResponse(
        opponents=[OpponentAdminData(**p.to_dict(include_secrets=True)) for p in profiles],
        total=len(profiles),
    )


@router.post("/admin", response_model=OpponentAdminData)
async def create_opponent(request: OpponentCreateRequest) -> OpponentAdminData:
    """Create an opponent, optionally backed by an external model."""
    model_config = None
    if request.host or request.api_key or request.model:
        model_config = _model_config(request)

    try:
        profile = orchestrator.registry.create(
            name=request.name,
            display_name=request.display_name,
            difficulty=request.difficulty,
            model_config=model_config,
            display_name_en=request.display_name_en,
            avatar=request.avatar,
            description=request.description,
            description_en=request.description_en,
            enabled=request.enabled,
            sort_order=request.sort_order,
        )
    except RoshamboError as e:
        raise to_http_exception(e)

    return OpponentAdminData(**profile.to_dict(include_secrets=True))


@router.put("/admin/{opponent_id}", response_model=OpponentAdminData)
async def update_opponent(opponent_id: int, request: OpponentUpdateRequest) -> OpponentAdminData:
    """Update the fields present in the request."""
    changes = {k: v for k, v in request.model_dump(exclude_unset=True).items() if v is not None}
    if "provider" in changes:
        changes["provider"] = changes["provider"].value

    try:
        profile = orchestrator.registry.update(opponent_id, **changes)
    except RoshamboError as e:
        raise to_http_exception(e)

    if not profile:
        raise HTTPException(status_code=404, detail=f"Opponent {opponent_id} not found")
    return OpponentAdminData(**profile.to_dict(include_secrets=True))


@router.delete("/admin/{opponent_id}")
async def delete_opponent(opponent_id: int) -> dict:
    """Delete an opponent that no game refers to."""
    if orchestrator.registry.get(opponent_id) is None:
        raise HTTPException(status_code=404, detail=f"Opponent {opponent_id} not found")

    games = orchestrator.store.count_for_opponent(opponent_id)
    if games > 0:
        raise HTTPException(
            status_code=400,
            detail=f"Opponent {opponent_id} has {games} games; disable it instead"
        )

    orchestrator.registry.delete(opponent_id)
    return {"status": "deleted", "opponent_id": opponent_id}


@router.post("/admin/test", response_model=ConnectionTestResponse)
async def test_connection(request: ModelConfigRequest) -> ConnectionTestResponse:
    """Check that a model config can reach its model."""
    try:
        result = await _diagnostic_adapter(request).test_connection()
    except RoshamboError as e:
        logger.warning("Connection test failed: %s", e)
        raise to_http_exception(e)

    return ConnectionTestResponse(**result)


@router.post("/admin/generate", response_model=GeneratedProfileResponse)
async def generate_profile(request: ModelConfigRequest) -> GeneratedProfileResponse:
    """Have the model write its own opponent name and description."""
    try:
        profile = await _diagnostic_adapter(request).generate_profile()
    except RoshamboError as e:
        logger.warning("Profile generation failed: %s", e)
        raise to_http_exception(e)

    return GeneratedProfileResponse(**profile)
