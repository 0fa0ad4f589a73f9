"""Exception handlers rendering every failure as an OpenAI-style error body."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.exceptions import BackendError, InternalError, NotFoundError, ProxyError

logger = logging.getLogger("cfshim")


def error_response(error: ProxyError) -> JSONResponse:
    return JSONResponse(error.to_payload(), status_code=error.status_code)


async def handle_proxy_error(request: Request, exc: ProxyError) -> JSONResponse:
    if isinstance(exc, BackendError):
        logger.error(
            "Backend error method=%s path=%s message=%s detail=%s",
            request.method,
            request.url.path,
            exc.message,
            exc.detail,
        )
    else:
        logger.warning(
            "Request error method=%s path=%s status=%s code=%s message=%s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.code,
            exc.message,
        )
    return error_response(exc)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # Unknown paths and wrong methods both read as "not found"
    if exc.status_code in (404, 405):
        logger.warning("No route for %s %s", request.method, request.url.path)
        return error_response(NotFoundError("Not found"))
    logger.warning(
        "HTTP error method=%s path=%s status=%s detail=%s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.detail,
    )
    return error_response(
        ProxyError(str(exc.detail), code="http_error", status_code=exc.status_code)
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error method=%s path=%s", request.method, request.url.path
    )
    return error_response(InternalError("Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProxyError, handle_proxy_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
