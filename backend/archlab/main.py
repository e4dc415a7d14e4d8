import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from archlab.agent.errors import DesignGenerationError
from archlab.api.main import api_router
from archlab.core.config import settings
from archlab.core.db import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_db()
    logger.info("%s API ready (environment=%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield


def design_error_status(exc: DesignGenerationError) -> int:
    if exc.rate_limited:
        return 429
    return 502


async def design_generation_error_handler(request: Request, exc: DesignGenerationError) -> JSONResponse:
    logger.error("Design pipeline failed (%s) for %s: %s", exc.kind, request.url.path, exc.message)
    return JSONResponse(
        status_code=design_error_status(exc),
        content={
            "detail": exc.message,
            "kind": exc.kind,
            "errors": [error.model_dump() for error in exc.errors],
        },
    )


def create_app() -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    if settings.all_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.all_cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(DesignGenerationError, design_generation_error_handler)  # type: ignore[arg-type]
    app.include_router(api_router)
    return app


app = create_app()
