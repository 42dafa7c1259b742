# api/errors.py
"""
Global exception handlers.

API callers get JSON `{"error": ...}` bodies. Browser navigation that hits an
unknown route or an unhandled failure is redirected to the client-rendered
error page with `type`, `code` and `message` query parameters.
"""
from urllib.parse import urlencode
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from services.errors import PaperStudioError

logger = logging.getLogger(__name__)

ERROR_PAGE = "/error.html"
API_PREFIXES = ("/api", "/session", "/sessions", "/health")


def wants_json(request: Request) -> bool:
    path = request.url.path
    if any(path == p or path.startswith(p + "/") for p in API_PREFIXES):
        return True
    return "application/json" in request.headers.get("accept", "")


def error_page_url(error_type: int, code: int, message: str) -> str:
    query = urlencode({"type": error_type, "code": code, "message": message})
    return f"{ERROR_PAGE}?{query}"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and not wants_json(request):
        return RedirectResponse(
            error_page_url(404, 404, "The requested page was not found"), status_code=302
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request payload."})


async def service_exception_handler(request: Request, exc: PaperStudioError):
    # Only reached when a router lets a service error through untranslated
    if exc.status_code >= 500:
        logger.error(f"Service error on {request.url.path}: {exc}", exc_info=exc)
        message = "Internal server error"
    else:
        message = exc.message
    return JSONResponse(status_code=exc.status_code, content={"error": message})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}", exc_info=exc)
    if wants_json(request):
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    return RedirectResponse(error_page_url(500, 500, "Internal server error"), status_code=302)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PaperStudioError, service_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
