"""Pydantic schemas for User and Auth."""

from pydantic import AfterValidator, BaseModel, EmailStr, Field
from datetime import datetime
from typing import Annotated, Optional

from app.domain.models.user import Role

# E-mails are stored and looked up lower-cased
Email = Annotated[EmailStr, AfterValidator(lambda value: value.lower())]


class UserCreate(BaseModel):
    name: str = Field(min_length=3)
    email: Email
    password: str
    role: Optional[Role] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3)
    email: Optional[Email] = None
    password: Optional[str] = None
    role: Optional[Role] = None


class UserRead(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    token: str
    token_type: str = "bearer"


class ForgotPasswordRequest(BaseModel):
    email: Email


class ResetPasswordRequest(BaseModel):
    email: Email
    recovery_code: str = Field(min_length=6, max_length=6)
    new_password: str


class MessageResponse(BaseModel):
    message: str
