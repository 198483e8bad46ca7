from sqlalchemy import Column, String, DateTime, Numeric, ForeignKey
from demobank.models.user import Base
from demobank.utils import utcnow

class Transaction(Base):
    __tablename__ = "transactions"
    id = Column(String, primary_key=True, index=True)
    account_id = Column(String, ForeignKey("accounts.id"), nullable=False, index=True)
    description = Column(String, nullable=False)
    # Signed: negative for money leaving the account
    amount = Column(Numeric(14, 2), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
