from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.auth import require_user_id
from backend.registry import EngineRegistry, get_registry
from backend.schemas import DashboardResponse, ErrorResponse, SnapshotResponse
from dashboard.engine import DashboardEngine

router = APIRouter()


async def get_dashboard_engine(
    user_id: str = Depends(require_user_id),
    registry: EngineRegistry = Depends(get_registry),
) -> DashboardEngine:
    return await registry.get(user_id)


async def load_dashboard_engine(
    user_id: str = Depends(require_user_id),
    registry: EngineRegistry = Depends(get_registry),
) -> DashboardEngine:
    return await registry.load(user_id)


def dashboard_payload(engine: DashboardEngine) -> DashboardResponse:
    error = engine.last_error
    return DashboardResponse(
        user_id=engine.user_id,
        snapshot=SnapshotResponse.model_validate(engine.snapshot),
        is_loading=engine.is_loading,
        last_error=ErrorResponse(**error.to_dict()) if error is not None else None,
    )


@router.get("/v1/dashboard", response_model=DashboardResponse)
async def get_dashboard(engine: DashboardEngine = Depends(load_dashboard_engine)):
    return dashboard_payload(engine)


@router.post("/v1/dashboard/refresh", response_model=DashboardResponse)
async def refresh_dashboard(engine: DashboardEngine = Depends(get_dashboard_engine)):
    await engine.refresh()
    return dashboard_payload(engine)
