from sqlalchemy import Column, String, Numeric, ForeignKey
from demobank.models.user import Base

class Account(Base):
    __tablename__ = "accounts"
    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    number = Column(String, nullable=False)
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")
