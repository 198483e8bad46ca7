from datetime import datetime
from typing import Optional
from demobank.schemas.base import CamelModel, Money

class AccountRead(CamelModel):
    id: str
    user_id: str
    name: str
    number: str
    balance: Money
    currency: str

class TransactionRead(CamelModel):
    id: str
    account_id: str
    description: str
    amount: Money
    created_at: datetime

class TransactionQuery(CamelModel):
    account_id: Optional[str] = None
