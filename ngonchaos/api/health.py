"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from ngonchaos import __version__
from ngonchaos.engine.registry import get_registry
from ngonchaos.models.responses import HealthResponse, RuleInfo

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        rules_registered=get_registry().count,
    )


@router.get("/rules", response_model=list[RuleInfo])
async def rules() -> list[RuleInfo]:
    return [RuleInfo(name=s.name, description=s.description) for s in get_registry().all()]
