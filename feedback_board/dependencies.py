"""FastAPI dependency providers for bearer authentication."""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from feedback_board.database import get_db
from feedback_board.errors import AuthenticationError
from feedback_board.logging_config import bind_user
from feedback_board.models import AccessToken, User
from feedback_board.security import resolve_token
from feedback_board.utils.dates import utcnow

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AccessToken:
    """Resolve the bearer token of the request or raise 401."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    access_token = resolve_token(db, credentials.credentials)
    if access_token is None:
        raise AuthenticationError()

    access_token.last_used_at = utcnow()
    db.commit()
    return access_token


def get_current_user(access_token: AccessToken = Depends(get_current_token)) -> User:
    user = access_token.user
    bind_user(user.id)
    return user
