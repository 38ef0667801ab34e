"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ngonchaos import __version__
from ngonchaos.config import settings
from ngonchaos.errors import ChaosGameError
from ngonchaos.models.responses import ErrorResponse

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.ngonchaos_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


async def _chaos_game_error_handler(request: Request, exc: ChaosGameError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    body = ErrorResponse(error=exc.kind, detail=str(exc))
    return JSONResponse(status_code=422, content=body.model_dump())


def create_app() -> FastAPI:
    app = FastAPI(
        title="ngonchaos",
        description="Chaos game on regular N-gons, streaming attractor points for external renderers",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ChaosGameError, _chaos_game_error_handler)

    from ngonchaos.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
