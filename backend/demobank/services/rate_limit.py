import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi.responses import JSONResponse
from fastapi import Request
from demobank.config import Settings, settings as default_settings
from demobank.errors import ErrorCode, HTTP_STATUS, error_body
from demobank.middlewares.request_id import get_request_id

logger = logging.getLogger(__name__)

# Global limiter instance for the app
limiter = Limiter(key_func=get_remote_address, default_limits=[], enabled=default_settings.rate_limit_enabled)

# Settings the limit callables read; replaced by configure_limiter
_active_settings: Settings = default_settings


def configure_limiter(settings: Settings) -> None:
    """Point the shared limiter at the settings of the app being built."""
    global _active_settings
    _active_settings = settings
    limiter.enabled = settings.rate_limit_enabled


def auth_limit() -> str:
    return _active_settings.auth_rate_limit


def otp_limit() -> str:
    return _active_settings.otp_rate_limit


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    request_id = get_request_id(request)
    logger.warning(f"[{request_id}] Rate limit hit on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=HTTP_STATUS[ErrorCode.rate_limited],
        content=error_body(ErrorCode.rate_limited.value, "Too many requests, please slow down.", request_id),
    )
