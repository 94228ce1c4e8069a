"""CORS middleware setup for the FastAPI application."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from usersync_api.config import Settings

logger = logging.getLogger(__name__)

_LOCAL_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
)


def get_allowed_origins(settings: Settings) -> list[str]:
    """Origins allowed to call the API: the UI URL, plus local dev servers outside production."""
    origins: list[str] = []
    if settings.ui_url:
        origins.append(settings.ui_url.rstrip("/"))
    if settings.environment.lower() in {"development", "dev", "local", "test"}:
        origins.extend(_LOCAL_ORIGINS)
    return list(dict.fromkeys(origins))


def get_cors_headers(origin: str | None, settings: Settings) -> dict[str, str]:
    """CORS headers for a response to ``origin``; empty if the origin is not allowed.

    Used for responses produced outside the middleware stack (unhandled errors).
    """
    if not origin or origin not in get_allowed_origins(settings):
        return {}
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Credentials": "true",
    }


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    allowed_origins = get_allowed_origins(settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("CORS enabled for origins: %s (environment=%s)", allowed_origins, settings.environment)
