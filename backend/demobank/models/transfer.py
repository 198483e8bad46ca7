from sqlalchemy import Column, String, DateTime, Integer, Numeric, ForeignKey
from demobank.models.user import Base
from demobank.utils import utcnow
import enum

class TransferStatus(enum.Enum):
    pending_otp = "PENDING_OTP"
    verified = "VERIFIED"
    completed = "COMPLETED"

class Transfer(Base):
    __tablename__ = "transfers"
    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    from_account_id = Column(String, nullable=False)
    # May name an account outside this bank
    to_account_id = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    status = Column(String, default=TransferStatus.pending_otp.value, nullable=False)
    note = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    # OTP challenge, all null until the first send
    otp_code = Column(String(6), nullable=True)
    otp_attempts = Column(Integer, nullable=True)
    otp_expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)
