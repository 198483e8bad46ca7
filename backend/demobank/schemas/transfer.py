from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import field_validator
from demobank.schemas.base import CamelModel, Money

class InitiateTransferRequest(CamelModel):
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    # Sign is not checked here
    amount: Optional[Decimal] = None

class InitiateTransferResponse(CamelModel):
    transfer_id: str
    status: str

class SendOtpRequest(CamelModel):
    transfer_id: Optional[str] = None

class SendOtpResponse(CamelModel):
    status: str
    code: str

class VerifyOtpRequest(CamelModel):
    transfer_id: Optional[str] = None
    code: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def _code_as_text(cls, value):
        # Numeric form fields send the code as a number
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value).zfill(6)
        return value

class VerifyOtpResponse(CamelModel):
    status: str

class ConfirmTransferRequest(CamelModel):
    transfer_id: Optional[str] = None
    note: Optional[str] = None

class Receipt(CamelModel):
    id: str
    from_account: str
    to_account: str
    amount: Money
    currency: str
    created_at: datetime
    reference: str

class ConfirmTransferResponse(CamelModel):
    transfer_id: str
    receipt: Receipt
