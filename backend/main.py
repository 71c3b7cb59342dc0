from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.db import dispose_engine
from backend.db_init import init_db
from backend.registry import reset_registry
from backend.routes import dashboard, habits, tasks


def create_app(bootstrap_db: bool = True) -> FastAPI:
    logging.basicConfig(
        level=os.getenv("BACKEND_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    app = FastAPI(title="Habit Dashboard API", version="0.1.0")

    app.include_router(dashboard.router)
    app.include_router(habits.router)
    app.include_router(tasks.router)

    if bootstrap_db:
        @app.on_event("startup")
        async def _startup():
            await init_db()

        @app.on_event("shutdown")
        async def _shutdown():
            reset_registry()
            await dispose_engine()

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logging.getLogger("backend").exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal error"})

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app


app = create_app()
