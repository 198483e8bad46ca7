"""
Transfer workflow: initiate -> send OTP -> verify OTP -> confirm.

Status only ever moves PENDING_OTP -> VERIFIED -> COMPLETED. A failed step
raises BankError and leaves the stored transfer as it was, except for the
attempt counter on a wrong code, which is persisted before raising.
"""
import logging
from contextlib import nullcontext
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy.orm import Session

from demobank.config import settings
from demobank.errors import BankError, ErrorCode
from demobank.models import Account, Transaction, Transfer, TransferStatus, User
from demobank.services.audit_log_service import log_transfer_event
from demobank.services.ledger_service import get_owned_account
from demobank.services.otp_service import OtpChallenge, new_challenge
from demobank.utils import create_id, is_blank, make_reference_code, utcnow

logger = logging.getLogger(__name__)

DEFAULT_TRANSFER_DESCRIPTION = "Transfer"


def _to_amount(value) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def _has_sub_cent(amount: Decimal) -> bool:
    # Balances are stored to the cent
    return amount.normalize().as_tuple().exponent < -2


def _get_transfer(db: Session, user: User, transfer_id: Optional[str]) -> Transfer:
    transfer = db.get(Transfer, transfer_id) if not is_blank(transfer_id) else None
    # Another user's transfer is reported exactly like a missing one
    if transfer is None or transfer.user_id != user.id:
        raise BankError(ErrorCode.transfer_not_found, "Transfer could not be located.")
    return transfer


def _challenge(transfer: Transfer) -> Optional[OtpChallenge]:
    if transfer.otp_code is None or transfer.otp_expires_at is None:
        return None
    return OtpChallenge(
        code=transfer.otp_code,
        expires_at=transfer.otp_expires_at,
        attempts=transfer.otp_attempts or 0,
    )


def _reject_if_completed(transfer: Transfer) -> None:
    if transfer.status == TransferStatus.completed.value:
        raise BankError(ErrorCode.transfer_already_completed, "This transfer has already been completed.")


def initiate(db: Session, user: User, from_account_id: Optional[str], to_account_id: Optional[str], amount, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    parsed_amount = _to_amount(amount)
    # Zero counts as missing; sign is left to caller-side validation
    if is_blank(from_account_id) or is_blank(to_account_id) or parsed_amount is None or parsed_amount == 0:
        raise BankError(ErrorCode.validation, "Please fill in all transfer fields.")
    if _has_sub_cent(parsed_amount):
        raise BankError(ErrorCode.validation, "Amounts can have at most two decimal places.")

    from_account = get_owned_account(db, user.id, from_account_id)
    if from_account is None:
        raise BankError(ErrorCode.account_not_found, "Source account not found.")

    if parsed_amount > from_account.balance:
        raise BankError(ErrorCode.insufficient_funds, "Insufficient funds for this transfer.")

    transfer = Transfer(
        id=create_id("transfer"),
        user_id=user.id,
        from_account_id=from_account_id,
        to_account_id=to_account_id,
        amount=parsed_amount,
        status=TransferStatus.pending_otp.value,
        created_at=now,
    )
    db.add(transfer)
    log_transfer_event(db, user.id, transfer.id, "initiated", f"Amount: {parsed_amount} from {from_account_id} to {to_account_id}", commit=False)
    db.commit()
    logger.info(f"Transfer {transfer.id} initiated by {user.id}")
    return {"transfer_id": transfer.id, "status": transfer.status}


def send_otp(db: Session, user: User, transfer_id: Optional[str], now: Optional[datetime] = None, ttl_seconds: Optional[int] = None) -> dict:
    """Issue a fresh challenge and hand the code straight back.

    A real bank would deliver the code out of band; this demo returns it
    in the response.
    """
    now = now or utcnow()
    transfer = _get_transfer(db, user, transfer_id)
    _reject_if_completed(transfer)

    challenge = new_challenge(now, ttl_seconds if ttl_seconds is not None else settings.otp_ttl_seconds)
    transfer.otp_code = challenge.code
    transfer.otp_attempts = challenge.attempts
    transfer.otp_expires_at = challenge.expires_at
    log_transfer_event(db, user.id, transfer.id, "otp_sent", f"Expires at {challenge.expires_at.isoformat()}", commit=False)
    db.commit()
    logger.info(f"OTP issued for transfer {transfer.id}")
    return {"status": "OTP_SENT", "code": challenge.code}


def verify_otp(db: Session, user: User, transfer_id: Optional[str], code: Optional[str], now: Optional[datetime] = None, max_attempts: Optional[int] = None, lock=None) -> dict:
    now = now or utcnow()
    max_attempts = max_attempts if max_attempts is not None else settings.otp_max_attempts
    # Attempt counting is a read-modify-write
    with lock if lock is not None else nullcontext():
        transfer = _get_transfer(db, user, transfer_id)
        challenge = _challenge(transfer)
        if challenge is None:
            raise BankError(ErrorCode.transfer_not_found, "Transfer could not be located.")
        _reject_if_completed(transfer)

        if challenge.is_expired(now):
            raise BankError(ErrorCode.otp_expired, "The one-time passcode has expired.")

        # Locked beats a correct code
        if challenge.is_locked(max_attempts):
            raise BankError(ErrorCode.otp_locked, "Too many attempts. Please contact your officer.")

        if not challenge.matches(code):
            transfer.otp_attempts = challenge.attempts + 1
            log_transfer_event(db, user.id, transfer.id, "otp_invalid", f"Attempt {transfer.otp_attempts} of {max_attempts}", commit=False)
            db.commit()
            logger.info(f"Wrong OTP for transfer {transfer.id} (attempt {transfer.otp_attempts})")
            raise BankError(ErrorCode.otp_invalid, "Invalid passcode. Please try again.")

        transfer.status = TransferStatus.verified.value
        log_transfer_event(db, user.id, transfer.id, "verified", commit=False)
        db.commit()
        return {"status": transfer.status}


def confirm(db: Session, user: User, transfer_id: Optional[str], note: Optional[str] = None, now: Optional[datetime] = None, lock=None) -> dict:
    """Move the money. Debit, credit, history row and status flip commit together."""
    now = now or utcnow()
    with lock if lock is not None else nullcontext():
        transfer = _get_transfer(db, user, transfer_id)
        if transfer.status != TransferStatus.verified.value:
            raise BankError(ErrorCode.otp_required, "Please verify the passcode before confirming.")

        from_account = get_owned_account(db, user.id, transfer.from_account_id)
        if from_account is None:
            raise BankError(ErrorCode.account_not_found, "Source account not found.")

        # Balance may have moved since initiation
        amount = Decimal(transfer.amount)
        if amount > from_account.balance:
            raise BankError(ErrorCode.insufficient_funds, "Insufficient funds for this transfer.")

        try:
            from_account.balance = from_account.balance - amount
            to_account = db.get(Account, transfer.to_account_id)
            if to_account is not None:
                to_account.balance = to_account.balance + amount

            record = Transaction(
                id=create_id("tx"),
                account_id=from_account.id,
                description=note or DEFAULT_TRANSFER_DESCRIPTION,
                amount=-amount,
                created_at=now,
            )
            db.add(record)

            transfer.status = TransferStatus.completed.value
            transfer.note = note
            transfer.reference = make_reference_code()
            transfer.completed_at = now
            log_transfer_event(db, user.id, transfer.id, "completed", f"Reference: {transfer.reference}", commit=False)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"Rolled back confirmation of transfer {transfer.id}")
            raise

    logger.info(f"Transfer {transfer.id} completed ({transfer.reference})")
    return {
        "transfer_id": transfer.id,
        "receipt": {
            "id": record.id,
            "from_account": from_account.number,
            "to_account": to_account.number if to_account is not None else transfer.to_account_id,
            "amount": amount,
            "currency": from_account.currency,
            "created_at": now,
            "reference": transfer.reference,
        },
    }
