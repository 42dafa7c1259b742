# api/routers/sessions.py
from fastapi import APIRouter, Depends, HTTPException, Request, Response
import logging

from api.dependencies.auth import (
    IS_PRODUCTION,
    SESSION_COOKIE,
    SESSION_COOKIE_MAX_AGE,
    get_current_user,
    get_session_gate,
    get_session_token,
)
from api.models.session_models import LoginRequest, SessionResponse, SignupRequest
from services.errors import AuthError, ConflictError, ValidationError
from services.session_service import Identity, SessionGate

logger = logging.getLogger(__name__)

router = APIRouter()

APP_REDIRECT = "/app.html"


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="lax",
        max_age=SESSION_COOKIE_MAX_AGE,
        path="/",
    )


@router.post("/sessions/signup", response_model=SessionResponse)
def signup(payload: SignupRequest, response: Response, gate: SessionGate = Depends(get_session_gate)):
    try:
        identity, token = gate.signup(payload.name, payload.email, payload.password)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ConflictError:
        raise HTTPException(status_code=409, detail="Email already registered. Please sign in.")
    except Exception:
        logger.error("Signup error", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create account. Please try again.")

    _set_session_cookie(response, token)
    return {"user": identity, "redirect": APP_REDIRECT, "token": token}


@router.post("/sessions/login", response_model=SessionResponse)
def login(payload: LoginRequest, response: Response, gate: SessionGate = Depends(get_session_gate)):
    try:
        identity, token = gate.login(payload.email, payload.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)
    except Exception:
        logger.error("Login error", exc_info=True)
        raise HTTPException(status_code=500, detail="Login failed. Please try again.")

    _set_session_cookie(response, token)
    return {"user": identity, "redirect": APP_REDIRECT, "token": token}


@router.post("/sessions/logout")
def logout(
    request: Request,
    response: Response,
    current_user: Identity = Depends(get_current_user),
    gate: SessionGate = Depends(get_session_gate),
):
    """
    Revokes the session server-side and clears the cookie.
    """
    try:
        gate.logout(get_session_token(request))
    except AuthError:
        # Revoked between the dependency check and now; already logged out
        pass
    response.delete_cookie(SESSION_COOKIE, path="/", httponly=True, secure=IS_PRODUCTION)
    return {"success": True}


@router.get("/session")
def read_session(current_user: Identity = Depends(get_current_user)):
    return {"user": current_user}
