from __future__ import annotations

from fastapi import APIRouter, Request


router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthcheck(request: Request):
    return {
        "status": "ok",
        "service": "nice-skills",
        "version": request.app.version,
    }
