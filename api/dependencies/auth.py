from fastapi import Depends, HTTPException, status, Request
from functools import lru_cache
from typing import Optional
import os

from services.credential_store import build_credential_store
from services.errors import AuthError
from services.session_service import (
    AUTH_REQUIRED_MESSAGE,
    SESSION_TTL_HOURS,
    Identity,
    SessionGate,
    build_session_registry,
)

SESSION_COOKIE = "paper_session"
SESSION_COOKIE_MAX_AGE = SESSION_TTL_HOURS * 60 * 60
IS_PRODUCTION = os.getenv("APP_ENV", "local") != "local"


@lru_cache(maxsize=1)
def get_session_gate() -> SessionGate:
    return SessionGate(build_credential_store(), build_session_registry())


def get_session_token(request: Request) -> Optional[str]:
    """
    Cookie first; Authorization header for API clients that cannot keep cookies.
    """
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        return token
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):].strip() or None
    return None


def get_current_user(
    request: Request,
    gate: SessionGate = Depends(get_session_gate),
) -> Identity:
    try:
        return gate.authenticate(get_session_token(request))
    except AuthError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTH_REQUIRED_MESSAGE,
            headers={"WWW-Authenticate": "Bearer"},
        )
