import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from demobank.api import accounts, auth, transfer, util
from demobank.config import Settings, settings as default_settings, validate_environment
from demobank.database import Store, create_store
from demobank.errors import DEFAULT_MESSAGE, BankError, ErrorCode, HTTP_STATUS, error_body
from demobank.logging_config import setup_logging
from demobank.middlewares.request_id import get_request_id
from demobank.security import SecurityConfig
from demobank.services.rate_limit import configure_limiter, limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


def _error_response(request: Request, code: str, message: str, status_code: int, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_body(code, message, get_request_id(request)),
        headers=headers,
    )


async def bank_error_handler(request: Request, exc: BankError):
    logger.info(f"[{get_request_id(request)}] {exc.code.value} on {request.method} {request.url.path}: {exc.message}")
    return _error_response(request, exc.code.value, exc.message, exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid value for {field}: {first.get('msg')}" if field else "Request body is not valid."
    return _error_response(request, ErrorCode.validation.value, message, 422)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unmatched routes and methods are unclassified, so they get the generic code
    if exc.status_code in (404, 405):
        message = f"Unknown endpoint: {request.url.path}"
    else:
        message = str(exc.detail) if exc.detail else "Request failed."
    return _error_response(request, ErrorCode.contact_officer.value, message, exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"[{get_request_id(request)}] Unhandled error on {request.method} {request.url.path}")
    return _error_response(
        request,
        ErrorCode.internal_error.value,
        DEFAULT_MESSAGE,
        HTTP_STATUS[ErrorCode.internal_error],
        # Sent from outside the middleware stack, so the id header is added here
        headers={"X-Request-ID": get_request_id(request)},
    )


def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    settings = settings or default_settings
    validate_environment(settings)

    app = FastAPI(title="Demo Bank API", version="0.1.0")
    app.state.settings = settings
    app.state.store = store if store is not None else create_store(settings)

    # Every error leaves as {errorCode, message, requestId}
    app.add_exception_handler(BankError, bank_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Security and rate limiting
    SecurityConfig(settings).apply_security_middleware(app)
    configure_limiter(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Routers
    app.include_router(util.router)
    app.include_router(auth.router)
    app.include_router(accounts.router)
    app.include_router(transfer.router)

    return app


def run() -> None:
    setup_logging(default_settings.log_level, default_settings.log_file)
    logger.info(f"API server listening on port {default_settings.port}")
    uvicorn.run(create_app(), host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    run()
