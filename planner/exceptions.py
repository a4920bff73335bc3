import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from planner.config import settings
from planner.log import get_logger

log = get_logger(__name__)


class AppError(Exception):
    """An expected failure whose message is safe to show to the client."""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _context(request: Request) -> str:
    client = request.client.host if request.client else "-"
    return f"{request.method} {request.url.path} - {client}"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log.warning("AppError %s: %s - %s", exc.status_code, exc.message, _context(request))
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})


async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("HTTP %s: %s - %s", exc.status_code, exc.detail, _context(request))
    else:
        log.warning("HTTP %s: %s - %s", exc.status_code, exc.detail, _context(request))
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Generic 500. Message and stack trace are only exposed in development."""
    log.exception("Unhandled error - %s", _context(request))
    body = {"success": False, "error": "Error interno del servidor"}
    if settings.is_development:
        body["error"] = str(exc) or exc.__class__.__name__
        body["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
