"""Schemas for users and authentication"""
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)
    password_confirmation: str

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if value != info.data.get("password"):
            raise ValueError("The password confirmation does not match.")
        return value


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class UserResponse(UserSummary):
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    message: str
    user: UserSummary
    token: str
    token_type: str = "Bearer"


class MessageResponse(BaseModel):
    message: str
