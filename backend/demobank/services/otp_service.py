from __future__ import annotations

import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

OTP_LENGTH = 6


@dataclass
class OtpChallenge:
    code: str
    expires_at: datetime
    attempts: int = 0

    def is_expired(self, now: datetime) -> bool:
        # Expiry instant itself is already too late
        return now >= self.expires_at

    def is_locked(self, max_attempts: int) -> bool:
        return self.attempts >= max_attempts

    def matches(self, code: str | None) -> bool:
        if code is None:
            return False
        return hmac.compare_digest(self.code, str(code).strip())


def generate_code() -> str:
    return str(100000 + secrets.randbelow(900000))


def new_challenge(now: datetime, ttl_seconds: int) -> OtpChallenge:
    return OtpChallenge(code=generate_code(), expires_at=now + timedelta(seconds=ttl_seconds))
