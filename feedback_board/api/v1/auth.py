"""Registration, login and token endpoints"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from feedback_board.database import get_db
from feedback_board.dependencies import get_current_token, get_current_user
from feedback_board.models import AccessToken, User
from feedback_board.schemas import AuthResponse, MessageResponse, UserCreate, UserLogin, UserResponse, UserSummary
from feedback_board.services import accounts

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    """Create an account and return its first bearer token."""
    user, token = accounts.register(db, user_in.name, user_in.email, user_in.password)
    return AuthResponse(
        message="User registered successfully",
        user=UserSummary.model_validate(user),
        token=token,
    )


@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Exchange credentials for a fresh token; earlier tokens are revoked."""
    user, token = accounts.login(db, credentials.email, credentials.password)
    return AuthResponse(message="Login successful", user=UserSummary.model_validate(user), token=token)


@router.get("/user", response_model=UserResponse)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/logout", response_model=MessageResponse)
def logout(access_token: AccessToken = Depends(get_current_token), db: Session = Depends(get_db)):
    accounts.logout(db, access_token)
    return MessageResponse(message="Logged out successfully")


@router.post("/logout-all", response_model=MessageResponse)
def logout_all(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    accounts.logout_all(db, current_user.id)
    return MessageResponse(message="Logged out from all devices successfully")
