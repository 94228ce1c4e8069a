"""Session authentication gate for protected routes."""

import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from usersync.infra.clerk import SessionVerificationError, SessionVerifier
from usersync.models.auth import AuthContext
from usersync_api.services import get_session_verifier

logger = logging.getLogger(__name__)

# Cookie Clerk sets for same-origin browser sessions
SESSION_COOKIE = "__session"


class UnauthenticatedError(Exception):
    """Raised by the auth gate to short-circuit a request with 401."""


def extract_session_token(request: Request) -> str | None:
    """Get the session token from the Authorization bearer header or the session cookie."""
    authorization = request.headers.get("authorization")
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return request.cookies.get(SESSION_COOKIE) or None


def require_auth(
    request: Request,
    verifier: SessionVerifier | None = Depends(get_session_verifier),
) -> AuthContext:
    """Dependency that yields the verified caller or rejects the request with 401.

    The context is also stored on ``request.state.auth``.
    """
    if verifier is None:
        logger.error("Session verification is not configured, rejecting request to %s", request.url.path)
        raise UnauthenticatedError("session verification not configured")

    token = extract_session_token(request)
    if not token:
        raise UnauthenticatedError("missing session token")

    try:
        auth = verifier.verify_token(token)
    except SessionVerificationError as e:
        logger.info("Rejected session token: %s", e)
        raise UnauthenticatedError(str(e)) from e

    request.state.auth = auth
    return auth


async def unauthenticated_handler(request: Request, exc: UnauthenticatedError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Unauthenticated"})


def setup_auth(app: FastAPI) -> None:
    """Register the 401 response for requests rejected by ``require_auth``."""
    app.add_exception_handler(UnauthenticatedError, unauthenticated_handler)
