"""
Tests for OTP challenge helpers.
"""
from datetime import datetime, timedelta

from demobank.services.otp_service import OtpChallenge, generate_code, new_challenge


def test_generate_code_is_six_digits():
    codes = {generate_code() for _ in range(200)}
    assert all(len(code) == 6 and code.isdigit() and not code.startswith("0") for code in codes)
    assert len(codes) > 1


def test_new_challenge_expiry():
    now = datetime(2024, 5, 1, 9, 30)
    challenge = new_challenge(now, 300)
    assert challenge.expires_at == now + timedelta(minutes=5)
    assert challenge.attempts == 0


def test_expiry_boundary():
    expires = datetime(2024, 5, 1, 9, 35)
    challenge = OtpChallenge(code="123456", expires_at=expires)
    assert not challenge.is_expired(expires - timedelta(seconds=1))
    assert challenge.is_expired(expires)
    assert challenge.is_expired(expires + timedelta(seconds=1))


def test_lock_threshold():
    challenge = OtpChallenge(code="123456", expires_at=datetime(2030, 1, 1), attempts=4)
    assert not challenge.is_locked(5)
    challenge.attempts = 5
    assert challenge.is_locked(5)


def test_matches():
    challenge = OtpChallenge(code="123456", expires_at=datetime(2030, 1, 1))
    assert challenge.matches("123456")
    assert challenge.matches(" 123456 ")
    assert not challenge.matches("654321")
    assert not challenge.matches(None)
