from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gateway.api import completions, health
from gateway.core.logging_config import configure_logging
from gateway.core.settings import Settings, get_settings
from gateway.providers.client import ProviderClient
from gateway.providers.errors import ProviderError

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "Invalid request: " + "; ".join(problems)


def create_app(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_client = http_client is None
        client = http_client or httpx.AsyncClient(timeout=settings.request_timeout_seconds)
        app.state.provider_client = ProviderClient(settings=settings, http_client=client)
        try:
            yield
        finally:
            if owned_client:
                await client.aclose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    @app.exception_handler(ProviderError)
    async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
        logger.error(
            "Completion failed kind=%s vendor=%s status=%s detail=%s",
            exc.kind.value,
            exc.vendor,
            exc.http_status,
            exc.vendor_message,
        )
        return JSONResponse(status_code=exc.http_status_code(), content={"error": exc.public_message()})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    app.include_router(health.router)
    app.include_router(completions.router)
    return app


app = create_app()
