from typing import List, Optional

from sqlalchemy.orm import Session

from demobank.models import Account, Transaction


def list_accounts_for_user(db: Session, user_id: str) -> List[Account]:
    # Ordering is for display only
    return db.query(Account).filter(Account.user_id == user_id).order_by(Account.name).all()


def get_owned_account(db: Session, user_id: str, account_id: Optional[str]) -> Optional[Account]:
    if not account_id:
        return None
    return db.query(Account).filter(Account.id == account_id, Account.user_id == user_id).first()


def list_transactions(db: Session, user_id: str, account_id: Optional[str] = None) -> List[Transaction]:
    """Transactions on the caller's own accounts, newest first.

    Filtering by an account the caller does not own yields nothing.
    """
    owned_ids = [account.id for account in list_accounts_for_user(db, user_id)]
    if account_id:
        owned_ids = [owned for owned in owned_ids if owned == account_id]
    if not owned_ids:
        return []
    transactions = db.query(Transaction).filter(Transaction.account_id.in_(owned_ids)).all()
    return sorted(transactions, key=lambda txn: txn.created_at, reverse=True)
