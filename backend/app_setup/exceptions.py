"""
Gestionnaires d'exceptions: toute erreur sous /api/ devient l'enveloppe {"success": false, "message": ...}.
- ApiError (ValidationError 400, VendorError 500, NotFoundError 404): statut et message portés par l'exception.
- HTTPException (404 route inconnue, 429 rate limit, ...): statut conservé, detail -> message.
- RequestValidationError (corps/paramètres invalides): 400, premier message Pydantic.
- Exception: 500 générique, trace journalisée, jamais renvoyée au client.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.utils.errors import ApiError

logger = logging.getLogger(__name__)

def envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})

def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors() or []
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg") or "Invalid value"
    return f"{location}: {msg}" if location else msg

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error("api error %s %s: %s", request.method, request.url.path, exc.message)
        return envelope(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
        response = envelope(exc.status_code, detail)
        for name, value in (getattr(exc, "headers", None) or {}).items():
            response.headers[name] = value
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return envelope(400, _validation_message(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Erreur non gérée %s %s", request.method, request.url.path)
        return envelope(500, "Internal server error")
