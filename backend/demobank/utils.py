import re
import time
import uuid
import secrets
import string
from datetime import datetime, timezone

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo anyway."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def create_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def create_request_id() -> str:
    return f"req_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


def make_reference_code() -> str:
    """Compact display reference such as REF-1A2B-3C4D."""
    def chunk():
        return "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(4))
    return f"REF-{chunk()}-{chunk()}"


def make_account_number() -> str:
    return str(secrets.randbelow(9 * 10**9) + 10**9)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value.strip()))


def is_blank(value) -> bool:
    return value is None or str(value).strip() == ""
