import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from demobank.config import settings
from demobank.errors import BankError, ErrorCode
from demobank.models import Account, SessionToken, User
from demobank.services.audit_log_service import log_audit_event, log_login_attempt
from demobank.services.token_service import create_session_token, decode_session_token
from demobank.utils import create_id, is_blank, is_valid_email, make_account_number, utcnow

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMER_NAME = "New Customer"
DEFAULT_ACCOUNT_NAME = "New Checking"


def user_summary(user: User) -> dict:
    return {"id": user.id, "email": user.email, "name": user.name}


def _issue_token(db: Session, user: User, secret: Optional[str] = None) -> str:
    token = create_session_token(user.id, secret)
    db.add(SessionToken(token=token, user_id=user.id, created_at=utcnow()))
    return token


def register(db: Session, email: Optional[str], password: Optional[str], name: Optional[str] = None, currency: Optional[str] = None, secret: Optional[str] = None) -> dict:
    if is_blank(email) or is_blank(password):
        raise BankError(ErrorCode.validation, "Email and password are required.")
    email = email.strip()
    if not is_valid_email(email):
        raise BankError(ErrorCode.validation, "Please enter a valid email address.")

    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise BankError(ErrorCode.email_in_use, "This email is already registered.")

    user = User(
        id=create_id("user"),
        email=email,
        password=password,
        name=(name or "").strip() or DEFAULT_CUSTOMER_NAME,
        created_at=utcnow(),
    )
    db.add(user)
    # New customers start with a blank checking account
    db.add(Account(
        id=create_id("acct"),
        user_id=user.id,
        name=DEFAULT_ACCOUNT_NAME,
        number=make_account_number(),
        balance=Decimal("0.00"),
        currency=currency or settings.default_currency,
    ))
    token = _issue_token(db, user, secret)
    log_audit_event(db, user.id, "register", f"Email: {email}", commit=False)
    db.commit()
    logger.info(f"Registered user {user.id}")
    return {"user": user_summary(user), "token": token}


def login(db: Session, email: Optional[str], password: Optional[str], secret: Optional[str] = None) -> dict:
    user = None
    if not is_blank(email) and password is not None:
        user = db.query(User).filter(User.email == email.strip(), User.password == password).first()
    if not user:
        log_login_attempt(db, None, email or "", "failure", "Invalid credentials")
        raise BankError(ErrorCode.invalid_credentials, "Incorrect email or password.")

    token = _issue_token(db, user, secret)
    log_login_attempt(db, user.id, user.email, "success")
    return {"user": user_summary(user), "token": token}


def require_auth(db: Session, token: Optional[str], secret: Optional[str] = None) -> User:
    if not token:
        raise BankError(ErrorCode.unauthorized, "Please sign in to continue.")
    session = db.get(SessionToken, token)
    if session is None or decode_session_token(token, secret) is None:
        raise BankError(ErrorCode.unauthorized, "Please sign in to continue.")
    user = db.get(User, session.user_id)
    if user is None:
        raise BankError(ErrorCode.unauthorized, "Session expired. Please log in again.")
    return user


def me(user: User) -> dict:
    return {"user": user_summary(user)}
