import os
import logging
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), '../.env'))

logger = logging.getLogger(__name__)

DEFAULT_SESSION_SECRET = "fallback-session-secret-for-development-only"

DEFAULT_CORS_ORIGINS = [
    "http://127.0.0.1:3000",
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Runtime configuration read from the environment."""

    def __init__(self):
        self.environment = os.getenv("ENVIRONMENT", "development").lower()
        self.database_url = os.getenv("DATABASE_URL", "sqlite://")
        self.session_secret = os.getenv("SESSION_SECRET", DEFAULT_SESSION_SECRET)
        self.otp_ttl_seconds = int(os.getenv("OTP_TTL_SECONDS", "300"))
        self.otp_max_attempts = int(os.getenv("OTP_MAX_ATTEMPTS", "5"))
        self.default_currency = os.getenv("DEFAULT_CURRENCY", "USD")
        self.seed_demo_data = _env_bool("SEED_DEMO_DATA", True)
        self.rate_limit_enabled = _env_bool("RATE_LIMIT_ENABLED", True)
        self.auth_rate_limit = os.getenv("AUTH_RATE_LIMIT", "5/minute")
        self.otp_rate_limit = os.getenv("OTP_RATE_LIMIT", "10/minute")
        self.cors_origins = _env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_file = os.getenv("LOG_FILE") or None
        self.officer_name = os.getenv("OFFICER_NAME", "Casey Taylor")
        self.officer_phone = os.getenv("OFFICER_PHONE", "+1 (555) 010-8899")
        self.officer_email = os.getenv("OFFICER_EMAIL", "support@demo-bank.test")
        self.host = os.getenv("HOST", "127.0.0.1")
        self.port = int(os.getenv("PORT", "3001"))

    @property
    def officer_contact(self) -> dict:
        return {
            "name": self.officer_name,
            "phone": self.officer_phone,
            "email": self.officer_email,
        }


def validate_environment(settings: Settings) -> None:
    """Warn about configuration that is unsafe outside local development"""
    if settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning("Using fallback SESSION_SECRET. Set SESSION_SECRET for anything beyond local development.")
    elif len(settings.session_secret) < 32:
        logger.warning("SESSION_SECRET should be at least 32 characters long")

    if settings.environment not in ["development", "test", "staging", "production"]:
        logger.warning(f"Invalid ENVIRONMENT value: {settings.environment}")

    if settings.otp_max_attempts < 1:
        logger.warning(f"OTP_MAX_ATTEMPTS={settings.otp_max_attempts} locks every challenge immediately")


settings = Settings()
