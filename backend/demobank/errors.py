import enum
from typing import Optional


class ErrorCode(str, enum.Enum):
    validation = "VALIDATION"
    unauthorized = "UNAUTHORIZED"
    email_in_use = "EMAIL_IN_USE"
    invalid_credentials = "INVALID_CREDENTIALS"
    account_not_found = "ACCOUNT_NOT_FOUND"
    insufficient_funds = "INSUFFICIENT_FUNDS"
    transfer_not_found = "TRANSFER_NOT_FOUND"
    transfer_already_completed = "TRANSFER_ALREADY_COMPLETED"
    otp_expired = "OTP_EXPIRED"
    otp_locked = "OTP_LOCKED"
    otp_invalid = "OTP_INVALID"
    otp_required = "OTP_REQUIRED"
    rate_limited = "RATE_LIMITED"
    contact_officer = "CONTACT_OFFICER"
    internal_error = "INTERNAL_ERROR"


HTTP_STATUS = {
    ErrorCode.validation: 400,
    ErrorCode.unauthorized: 401,
    ErrorCode.email_in_use: 409,
    ErrorCode.invalid_credentials: 401,
    ErrorCode.account_not_found: 404,
    ErrorCode.insufficient_funds: 422,
    ErrorCode.transfer_not_found: 404,
    ErrorCode.transfer_already_completed: 409,
    ErrorCode.otp_expired: 400,
    ErrorCode.otp_locked: 423,
    ErrorCode.otp_invalid: 400,
    ErrorCode.otp_required: 409,
    ErrorCode.rate_limited: 429,
    ErrorCode.contact_officer: 500,
    ErrorCode.internal_error: 500,
}

DEFAULT_MESSAGE = "Something went wrong. Please contact support."


class BankError(Exception):
    """Raised by the service layer; `code` is what callers branch on."""

    def __init__(self, code: ErrorCode, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code or HTTP_STATUS.get(code, 500)

    def __repr__(self):
        return f"BankError({self.code.value}, {self.message!r})"


def error_body(code: str, message: str, request_id: str) -> dict:
    """The one error shape every boundary emits."""
    return {"errorCode": code, "message": message or DEFAULT_MESSAGE, "requestId": request_id}
