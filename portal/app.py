from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from portal.core.config import Settings, get_settings
from portal.core.logging import configure_logging
from portal.repositories.json_storage import StorageWriteError
from portal.routers import clients as clients_router
from portal.routers import clients_api as clients_api_router
from portal.routers import pages as pages_router
from portal.services.client_service import ClientService

logger = logging.getLogger(__name__)

BASE = os.path.dirname(__file__)
STATIC = os.path.join(BASE, "static")
TEMPLATES = os.path.join(BASE, "templates")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; img-src 'self' data:; style-src 'self' 'unsafe-inline'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


async def storage_error_handler(request: Request, exc: StorageWriteError):
    logger.error("Request %s %s failed to persist: %s", request.method, request.url.path, exc)
    if request.url.path.startswith("/api/"):
        return JSONResponse({"error": "StorageError"}, status_code=500)
    return HTMLResponse("<h1>Client data could not be saved</h1>", status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``uvicorn portal.app:create_app --factory``)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="NorthStar Client Portal")
    app.mount("/static", StaticFiles(directory=STATIC), name="static")
    app.state.templates = Jinja2Templates(directory=TEMPLATES)
    app.state.client_service = ClientService(settings.data_file)

    allowed_cors = {settings.public_base_url}
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:8000", "http://127.0.0.1:8000"})
    allowed_cors = {origin for origin in allowed_cors if origin}
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_exception_handler(StorageWriteError, storage_error_handler)

    app.include_router(pages_router.router)
    app.include_router(clients_api_router.router)
    app.include_router(clients_router.router)

    logger.info("Client portal ready (env=%s, data=%s)", settings.app_env, settings.data_file)
    return app


app = create_app()
