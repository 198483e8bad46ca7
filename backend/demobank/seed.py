"""
Demo data loaded into a fresh store.

Clears every table first so reseeding a persistent database does not
duplicate records.
"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from demobank.models import Account, AuditLog, SessionToken, Transaction, Transfer, User
from demobank.services.audit_log_service import log_audit_event
from demobank.utils import utcnow

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@bank.test"
DEMO_PASSWORD = "password123"


def seed_database(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()

    for model in (AuditLog, Transaction, Transfer, SessionToken, Account, User):
        db.query(model).delete()

    customer = User(
        id="user-1",
        email=DEMO_EMAIL,
        password=DEMO_PASSWORD,
        name="Demo Customer",
        created_at=now,
    )
    db.add(customer)

    checking = Account(
        id="acct-1",
        user_id=customer.id,
        name="Everyday Checking",
        number="1234567890",
        balance=Decimal("4280.75"),
        currency="USD",
    )
    savings = Account(
        id="acct-2",
        user_id=customer.id,
        name="Savings Vault",
        number="9876543210",
        balance=Decimal("13250.35"),
        currency="USD",
    )
    db.add_all([checking, savings])

    db.add_all([
        Transaction(
            id="tx-1",
            account_id=checking.id,
            description="Coffee shop",
            amount=Decimal("-8.75"),
            created_at=now - timedelta(hours=4),
        ),
        Transaction(
            id="tx-2",
            account_id=checking.id,
            description="Direct deposit",
            amount=Decimal("1800.00"),
            created_at=now - timedelta(hours=26),
        ),
        Transaction(
            id="tx-3",
            account_id=savings.id,
            description="Transfer to checking",
            amount=Decimal("-200.00"),
            created_at=now - timedelta(hours=30),
        ),
    ])

    log_audit_event(db, None, "seed_database", "Initial seed complete", commit=False)
    db.commit()
    logger.info("Seeded demo customer %s with %d accounts", DEMO_EMAIL, 2)

    return {
        "customer": customer,
        "checking_account": checking,
        "savings_account": savings,
    }
