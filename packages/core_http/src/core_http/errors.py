from __future__ import annotations
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse
from core_logging import get_logger, log_stage, current_request_id
from core_logging.error_codes import ErrorCode
from core_utils import jsonx


class ClientInputError(Exception):
    """A required client-supplied field is missing or malformed (HTTP 400)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UpstreamError(Exception):
    """
    An upstream call failed: transport error or non-2xx status.
    ``message`` is human-readable and relayed to clients verbatim.
    """

    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None,
                 code: ErrorCode = ErrorCode.upstream_error) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url
        self.code = code


def error_response(status_code: int, message: str, *, details: object | None = None) -> JSONResponse:
    """
    Flat error envelope ``{"error": ..., ["details": ...]}``.
    """
    payload: dict = {"error": message}
    if details is not None:
        payload["details"] = jsonx.sanitize(details)
    return JSONResponse(status_code=status_code, content=payload)


def attach_standard_error_handlers(app: FastAPI, *, service: str) -> None:
    """
    Uniform error shaping across services:
      - 400: ClientInputError / request validation
      - Starlette HTTP errors (JSON passthrough)
      - 500: Catch-all with {error, details}
    """
    logger = get_logger(service)

    @app.exception_handler(ClientInputError)
    async def _client_input_handler(request: Request, exc: ClientInputError):
        log_stage(logger, "validation", "failed",
                  request_id=current_request_id(), error_code=ErrorCode.validation_failed.value,
                  error=exc.message, path=request.url.path, method=request.method)
        return error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _validation_exc_handler(request: Request, exc: RequestValidationError):
        log_stage(logger, "validation", "failed",
                  request_id=current_request_id(), error_code=ErrorCode.validation_failed.value,
                  errors=jsonx.sanitize(exc.errors()), path=request.url.path, method=request.method)
        return error_response(400, "Request validation failed", details=exc.errors())

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(_: Request, exc: StarletteHTTPException):
        # Keep Starlette semantics but JSON-first body
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail},
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def _unhandled_exc_handler(request: Request, exc: Exception):
        logger.error("unhandled_exception", stage="request",
                     request_id=current_request_id(), error_code=ErrorCode.internal.value,
                     error=str(exc), error_type=exc.__class__.__name__,
                     path=request.url.path, method=request.method, exc_info=exc)
        return error_response(500, "Unexpected error", details=f"{exc.__class__.__name__}: {exc}")
