"""Error Handlers — JSON envelopes for /api routes, an error page for everything else.

Invariants:
    - /api/* failures answer JSON: TaskHiveError.to_response(), a
      VALIDATION_ERROR envelope with per-field details, or INTERNAL_ERROR
    - Page failures render pages/error.html with the message in form_error,
      under the same status code the JSON answer would carry
    - 5xx logged at ERROR, 4xx at WARNING
    - Unhandled exception text never reaches the client

Design Decisions:
    - The path prefix picks the format (no Accept negotiation): browsers
      only load page routes, API clients only call /api/v1
    - Field names drop the "body" location prefix so they match the
      signup form's own field keys
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taskhive.components import render_page
from taskhive.core.errors import ErrorCategory, ErrorSeverity, TaskHiveError

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"
INVALID_REQUEST_MESSAGE = "Invalid request data"
UNEXPECTED_MESSAGE = "An unexpected error occurred"

_PAGE_TITLES = {
    401: "Please log in",
    404: "Not found",
    409: "Already registered",
    503: "Service unavailable",
}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskHiveError, handle_taskhive_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)


async def handle_taskhive_error(request: Request, exc: TaskHiveError):
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "user_id": exc.context.user_id,
        },
    )
    if not _is_api(request):
        return _error_page(request, exc.http_status, exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(p) for p in err["loc"] if p != "body"),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Request validation failed: {[d['field'] for d in details]}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    if not _is_api(request):
        return _error_page(
            request, status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_MESSAGE,
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": INVALID_REQUEST_MESSAGE,
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def handle_unexpected(request: Request, exc: Exception):
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    if not _is_api(request):
        return _error_page(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_MESSAGE,
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": UNEXPECTED_MESSAGE,
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def _is_api(request: Request) -> bool:
    return request.url.path.startswith(API_PREFIX)


def _error_page(request: Request, status_code: int, message: str):
    return render_page(request, "pages/error.html", {
        "title": _PAGE_TITLES.get(status_code, "Something went wrong"),
        "message": message,
    }, status_code=status_code)
