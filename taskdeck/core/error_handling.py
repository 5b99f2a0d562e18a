"""Request-id propagation, request logging and JSON error responses."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from time import perf_counter
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.datastructures import Headers, MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskdeck.core.config import settings
from taskdeck.core.errors import StoreError, TaskdeckError
from taskdeck.core.logging import get_logger

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = get_logger(__name__)
REQUEST_ID_HEADER = "X-Request-Id"
HEALTH_PATHS = frozenset({"/health", "/healthz", "/readyz"})
INTERNAL_ERROR_DETAIL = "Internal Server Error"


def _json_safe(value: Any) -> Any:
    """Coerce validation error payloads into JSON-serializable values."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, Sequence):
        return [_json_safe(item) for item in value]
    return str(value)


def _get_request_id(request: Request) -> str | None:
    request_id = getattr(request.state, "request_id", None)
    if not isinstance(request_id, str) or not request_id:
        return None
    return request_id


def _error_payload(
    *,
    detail: Any,
    request_id: str | None,
    code: str | None = None,
    retryable: bool | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"detail": detail}
    if code is not None:
        payload["code"] = code
    if retryable is not None:
        payload["retryable"] = retryable
    if request_id is not None:
        payload["request_id"] = request_id
    return payload


def _json_response(
    request: Request,
    *,
    status_code: int,
    payload: dict[str, Any],
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    response_headers = dict(headers or {})
    request_id = _get_request_id(request)
    if request_id is not None:
        response_headers[REQUEST_ID_HEADER] = request_id
    return JSONResponse(status_code=status_code, content=payload, headers=response_headers)


class RequestContextMiddleware:
    """Assign a request id to every HTTP request and log its outcome."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = (Headers(scope=scope).get(REQUEST_ID_HEADER) or "").strip()
        request_id = incoming or uuid4().hex
        scope.setdefault("state", {})["request_id"] = request_id
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        started = perf_counter()

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = int(message["status"])
                headers = MutableHeaders(scope=message)
                if REQUEST_ID_HEADER not in headers:
                    headers.append(REQUEST_ID_HEADER, request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            _log_request(
                scope,
                request_id=request_id,
                status_code=status_code,
                duration_ms=(perf_counter() - started) * 1000,
            )


def _log_request(
    scope: Scope,
    *,
    request_id: str,
    status_code: int,
    duration_ms: float,
) -> None:
    path = str(scope.get("path", ""))
    if path in HEALTH_PATHS and not settings.request_log_include_health:
        return
    extra = {
        "request_id": request_id,
        "method": scope.get("method"),
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
    }
    threshold = settings.request_log_slow_ms
    if threshold and duration_ms >= threshold:
        logger.warning("http.request.slow", extra={**extra, "slow_threshold_ms": threshold})
        return
    logger.info("http.request", extra=extra)


async def _request_validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, RequestValidationError):
        raise TypeError("Expected RequestValidationError")
    return _json_response(
        request,
        status_code=422,
        payload=_error_payload(
            detail=_json_safe(exc.errors()),
            request_id=_get_request_id(request),
        ),
    )


async def _response_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    if not isinstance(exc, ResponseValidationError):
        raise TypeError("Expected ResponseValidationError")
    logger.error(
        "http.response.validation_failed",
        extra={"request_id": _get_request_id(request), "errors": _json_safe(exc.errors())},
    )
    return _json_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        payload=_error_payload(
            detail=INTERNAL_ERROR_DETAIL,
            request_id=_get_request_id(request),
        ),
    )


async def _http_exception_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, StarletteHTTPException):
        raise TypeError("Expected StarletteHTTPException")
    return _json_response(
        request,
        status_code=exc.status_code,
        payload=_error_payload(detail=exc.detail, request_id=_get_request_id(request)),
        headers=exc.headers,
    )


async def _taskdeck_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, TaskdeckError):
        raise TypeError("Expected TaskdeckError")
    request_id = _get_request_id(request)
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "taskdeck.error code=%s message=%s",
            exc.code,
            exc.message,
            extra={"request_id": request_id},
            exc_info=exc.__cause__ is not None,
        )
    else:
        logger.warning(
            "taskdeck.error code=%s message=%s",
            exc.code,
            exc.message,
            extra={"request_id": request_id},
        )
    return _json_response(
        request,
        status_code=exc.status_code,
        payload=_error_payload(
            detail={"code": exc.code, "message": exc.message},
            request_id=request_id,
            code=exc.code,
            retryable=exc.retryable,
        ),
    )


async def _sqlalchemy_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, SQLAlchemyError):
        raise TypeError("Expected SQLAlchemyError")
    logger.error(
        "store.request_failed error_type=%s",
        exc.__class__.__name__,
        extra={"request_id": _get_request_id(request)},
        exc_info=exc,
    )
    return await _taskdeck_error_handler(request, StoreError())


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "http.request.unhandled_error error_type=%s",
        exc.__class__.__name__,
        extra={"request_id": _get_request_id(request)},
        exc_info=exc,
    )
    return _json_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        payload=_error_payload(
            detail=INTERNAL_ERROR_DETAIL,
            request_id=_get_request_id(request),
        ),
    )


def install_error_handling(app: FastAPI) -> None:
    """Register request-id middleware and JSON exception handlers on `app`."""
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(RequestValidationError, _request_validation_exception_handler)
    app.add_exception_handler(ResponseValidationError, _response_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_exception_handler)
    app.add_exception_handler(TaskdeckError, _taskdeck_error_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
