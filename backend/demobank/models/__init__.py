from demobank.models.user import Base, User
from demobank.models.session import SessionToken
from demobank.models.account import Account
from demobank.models.transaction import Transaction
from demobank.models.transfer import Transfer, TransferStatus
from demobank.models.audit_log import AuditLog

__all__ = [
    "Base",
    "User",
    "SessionToken",
    "Account",
    "Transaction",
    "Transfer",
    "TransferStatus",
    "AuditLog",
]
