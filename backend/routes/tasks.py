from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from backend.routes.dashboard import dashboard_payload, get_dashboard_engine
from backend.routes.mutations import mutation_response
from backend.schemas import MutationResponse
from dashboard.engine import DashboardEngine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/v1/todos/{todo_id}/complete", response_model=MutationResponse)
async def complete_todo(todo_id: str, engine: DashboardEngine = Depends(get_dashboard_engine)):
    result = await engine.complete_todo(todo_id)
    if result.ok:
        logger.info("Todo %s completed", todo_id)
    return mutation_response(result, dashboard_payload(engine))
