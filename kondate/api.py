# -*- coding: utf-8 -*-
"""
AI 献立プランナー API

食材リストや食材の写真から、AI が1日の献立（朝食・昼食・夕食）を提案する。
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .meal_plan.api import invalid_request_message, router as meal_plan_router

log = logging.getLogger(__name__)

app = FastAPI(
    title="AI献立プランナー",
    description="食材や画像から、栄養バランスを考慮した1日の献立を生成",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    servers=[{"url": settings.base_url}],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(meal_plan_router)


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError):
    message = invalid_request_message(request.url.path, exc.errors())
    if message is None:
        return await request_validation_exception_handler(request, exc)
    log.info("rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/api/health")
def health_check():
    """Liveness probe."""
    return {
        "status": "ok",
        "version": __version__,
        "timestamp": datetime.now().isoformat(),
    }


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    uvicorn.run("kondate.api:app", host=settings.host, port=settings.port, reload=False)
