import logging
import secrets
from jose import jwt, JWTError
from demobank.config import settings
from demobank.utils import utcnow

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"


def create_session_token(user_id: str, secret: str | None = None) -> str:
    """Opaque session token for a user.

    No `exp` claim: sessions never expire, the sessions table decides
    whether a token is still known. The `jti` keeps every issue unique.
    """
    to_encode = {
        "sub": user_id,
        "jti": secrets.token_hex(8),
        "iat": int(utcnow().timestamp()),
    }
    return jwt.encode(to_encode, secret or settings.session_secret, algorithm=TOKEN_ALGORITHM)


def decode_session_token(token: str, secret: str | None = None):
    try:
        return jwt.decode(token, secret or settings.session_secret, algorithms=[TOKEN_ALGORITHM])
    except JWTError as e:
        logger.info(f"Rejected session token: {e}")
        return None


def extract_bearer_token(authorization: str | None) -> str | None:
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return None
