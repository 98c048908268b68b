"""Registration, login and token revocation."""
import logging
from typing import Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from feedback_board.errors import ValidationError
from feedback_board.models import AccessToken, User
from feedback_board.security import hash_password, issue_token, verify_password

logger = logging.getLogger(__name__)


def register(db: Session, name: str, email: str, password: str) -> Tuple[User, str]:
    """Create a user and issue their first token. Returns ``(user, raw_token)``."""
    email = email.strip().lower()
    if db.query(User).filter(func.lower(User.email) == email).first():
        raise ValidationError.for_field("email", "The email has already been taken.")

    user = User(name=name.strip(), email=email, password_hash=hash_password(password))
    db.add(user)
    db.flush()
    _, raw_token = issue_token(db, user)
    db.commit()
    db.refresh(user)

    logger.info("registered user %s", user.id)
    return user, raw_token


def login(db: Session, email: str, password: str) -> Tuple[User, str]:
    """Check credentials, revoke the user's existing tokens and issue a new one."""
    user = db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("failed login for %s", email)
        raise ValidationError.for_field("email", "The provided credentials are incorrect.")

    db.query(AccessToken).filter(AccessToken.user_id == user.id).delete(synchronize_session=False)
    _, raw_token = issue_token(db, user)
    db.commit()
    db.refresh(user)

    logger.info("user %s logged in", user.id)
    return user, raw_token


def logout(db: Session, access_token: AccessToken) -> None:
    """Revoke the token used for the current request."""
    db.delete(access_token)
    db.commit()


def logout_all(db: Session, user_id: int) -> int:
    """Revoke every token of ``user_id``. Returns the number revoked."""
    revoked = db.query(AccessToken).filter(AccessToken.user_id == user_id).delete(synchronize_session=False)
    db.commit()
    logger.info("user %s revoked %d token(s)", user_id, revoked)
    return revoked
