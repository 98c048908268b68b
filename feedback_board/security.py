"""Password hashing and opaque bearer tokens."""
import hashlib
import secrets
from datetime import timedelta
from typing import Optional, Tuple

import bcrypt
from sqlalchemy.orm import Session

from feedback_board.config import settings
from feedback_board.models import AccessToken, User
from feedback_board.utils.dates import as_utc, utcnow

TOKEN_NAME = "auth_token"


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def hash_token(token: str) -> str:
    """SHA-256 hash of a bearer token for DB storage."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def issue_token(db: Session, user: User, name: str = TOKEN_NAME) -> Tuple[AccessToken, str]:
    """Create an access token row. Returns the row and the raw token (shown once)."""
    raw_token = secrets.token_urlsafe(40)
    expires_at = None
    if settings.TOKEN_EXPIRE_MINUTES > 0:
        expires_at = utcnow() + timedelta(minutes=settings.TOKEN_EXPIRE_MINUTES)

    access_token = AccessToken(
        user_id=user.id,
        name=name,
        token_hash=hash_token(raw_token),
        expires_at=expires_at,
    )
    db.add(access_token)
    db.flush()
    return access_token, raw_token


def resolve_token(db: Session, raw_token: str) -> Optional[AccessToken]:
    """Return the live token row for ``raw_token``, or None."""
    access_token = db.query(AccessToken).filter(AccessToken.token_hash == hash_token(raw_token)).first()
    if access_token is None:
        return None

    expires_at = as_utc(access_token.expires_at)
    if expires_at is not None and expires_at <= utcnow():
        return None
    return access_token
