from fastapi import Depends, Request
from sqlalchemy.orm import Session
from demobank.config import Settings
from demobank.database import get_db, get_settings
from demobank.models import User
from demobank.services.auth_service import require_auth
from demobank.services.token_service import extract_bearer_token


def _extract_token(request: Request) -> str | None:
    return extract_bearer_token(request.headers.get("Authorization"))


# Dependency resolving the bearer token to a user; raises UNAUTHORIZED otherwise
def get_current_user(request: Request, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> User:
    return require_auth(db, _extract_token(request), secret=settings.session_secret)
