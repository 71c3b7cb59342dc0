from __future__ import annotations

from fastapi import HTTPException

from backend.schemas import DashboardResponse, LogEntryResponse, MutationResponse
from dashboard.engine import MutationResult


def mutation_response(result: MutationResult, dashboard: DashboardResponse) -> MutationResponse:
    if not result.ok:
        raise HTTPException(status_code=503, detail=result.error.to_dict())
    return MutationResponse(
        ok=True,
        message=result.message,
        entry=LogEntryResponse.model_validate(result.entry) if result.entry is not None else None,
        dashboard=dashboard,
    )
