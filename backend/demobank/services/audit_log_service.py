from sqlalchemy.orm import Session
from demobank.models.audit_log import AuditLog
from demobank.utils import utcnow


def log_audit_event(db: Session, user_id: str | None, action: str, details: str | None = None, commit: bool = True):
    log = AuditLog(
        user_id=user_id,
        action=action,
        details=details,
        timestamp=utcnow()
    )
    db.add(log)
    if commit:
        db.commit()
    return log


def log_login_attempt(db: Session, user_id: str | None, email: str, status: str, details: str | None = None):
    combined_details = f"{details}. Email: {email}" if details else f"Email: {email}"
    return log_audit_event(db, user_id, f"login_{status}", combined_details)


def log_transfer_event(db: Session, user_id: str, transfer_id: str, action: str, details: str | None = None, commit: bool = True):
    return log_audit_event(
        db,
        user_id,
        f"transfer_{action}",
        f"Transfer ID: {transfer_id}. {details or ''}".strip(),
        commit=commit,
    )
