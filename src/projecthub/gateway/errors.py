"""异常 -> HTTP 响应映射

所有错误响应统一为 {"error": {"code": ..., "message": ...}}。
"""

import aiosqlite
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from projecthub.core.exceptions import (
    AuthenticationRequiredError,
    ConflictError,
    FormValidationError,
    NotFoundError,
    ProjectHubError,
    StoreError,
)
from starlette.responses import JSONResponse

log = structlog.get_logger()


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


def status_for(exc: ProjectHubError) -> int:
    if isinstance(exc, AuthenticationRequiredError):
        return 401
    if isinstance(exc, FormValidationError):
        return 422
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ConflictError):
        return 409
    if isinstance(exc, StoreError):
        return 503
    return 500


async def _handle_projecthub_error(request: Request, exc: ProjectHubError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        log.error("request_failed", code=exc.code, error=exc.message)
    response = error_response(status_code, exc.code, exc.message)
    if status_code == 401:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


async def _handle_store_driver_error(request: Request, exc: aiosqlite.Error) -> JSONResponse:
    log.error("store_read_failed", error_type=type(exc).__name__)
    return error_response(503, StoreError.code, f"store failed: {type(exc).__name__}")


async def _handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "invalid request")
    return error_response(
        422, FormValidationError.code, f"{field}: {message}" if field else message
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _handle_request_validation_error)
    app.add_exception_handler(ProjectHubError, _handle_projecthub_error)
    app.add_exception_handler(aiosqlite.Error, _handle_store_driver_error)
