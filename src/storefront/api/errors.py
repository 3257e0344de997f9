"""Map domain and request errors onto HTTP responses.

Error bodies are ``{"error": <messages>}``; ``messages`` is the field-keyed
dict a ValidationError carries, or a plain string.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


def _error(status_code: int, error) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": jsonable_encoder(error)})


def _messages(exc: Exception):
    messages = getattr(exc, "messages", None)
    return messages if messages else str(exc)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        fields = {}
        for err in exc.errors():
            key = ".".join(str(part) for part in err["loc"] if part != "body") or "body"
            fields.setdefault(key, []).append(err["msg"])
        return _error(400, fields)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        response = _error(exc.status_code, exc.detail)
        for name, value in (exc.headers or {}).items():
            response.headers[name] = value
        return response

    @app.exception_handler(ValidationError)
    async def domain_validation_error(request: Request, exc: ValidationError):
        return _error(400, _messages(exc))

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_error(request: Request, exc: ObjectNotFoundError):
        return _error(404, _messages(exc))

    @app.exception_handler(ExpectedVersionError)
    async def version_conflict_error(request: Request, exc: ExpectedVersionError):
        logger.warning("version_conflict", path=request.url.path, detail=str(exc))
        return _error(409, "The record was changed by another request; reload and try again")

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path, method=request.method)
        return _error(500, "Internal server error")
