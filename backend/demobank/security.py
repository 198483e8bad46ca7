"""
Security configuration for the demo bank API: CORS, response hardening
headers and request ids.
"""

import logging
from typing import List
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from demobank.config import Settings
from demobank.middlewares.request_id import RequestIdMiddleware

logger = logging.getLogger(__name__)


class SecurityConfig:
    """Security configuration class"""

    def __init__(self, settings: Settings):
        self.environment = settings.environment
        self.cors_origins = self._get_cors_origins(settings)

    def _get_cors_origins(self, settings: Settings) -> List[str]:
        """Get CORS origins based on environment"""
        if self.environment == "production":
            return [origin for origin in settings.cors_origins if origin.startswith("https://")]
        return settings.cors_origins

    def apply_security_middleware(self, app: FastAPI) -> None:
        """Apply all security middleware to the FastAPI app."""

        # Security headers
        app.add_middleware(SecurityHeadersMiddleware)

        # Request ids wrap the headers middleware so error responses carry them too
        app.add_middleware(RequestIdMiddleware)

        # Finally, add CORS outermost so even error responses include CORS headers
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self.cors_origins,
            allow_credentials=False,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=[
                "Accept",
                "Content-Type",
                "Authorization",
                "X-Request-ID",
                "X-Requested-With",
                "Origin",
            ],
            expose_headers=["X-Request-ID"],
            max_age=86400,
        )

        logger.info(f"Security middleware applied for environment: {self.environment}")


class SecurityHeadersMiddleware:
    """Middleware to add security headers to all responses"""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        async def send_with_headers(message):
            if message.get("type") == "http.response.start":
                existing_headers = list(message.get("headers", []))

                security_headers = {
                    b"X-Content-Type-Options": b"nosniff",
                    b"X-Frame-Options": b"DENY",
                    b"Referrer-Policy": b"strict-origin-when-cross-origin",
                    b"Cache-Control": b"no-store",
                    # JSON only, nothing to load
                    b"Content-Security-Policy": b"default-src 'none'; frame-ancestors 'none'",
                }

                for k, v in security_headers.items():
                    existing_headers.append((k, v))

                message["headers"] = existing_headers

            await send(message)

        return await self.app(scope, receive, send_with_headers)
