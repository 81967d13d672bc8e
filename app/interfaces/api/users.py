"""Users API routes: registration, login, password recovery and profiles."""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from app.interfaces.api.deps import get_current_identity, get_identity_if_valid, require_full_admin
from app.interfaces.deps import get_email_client, get_user_repository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ResetPasswordRequest,
    UserCreate,
    UserRead,
    UserUpdate,
)
from app.infrastructure.email import ResendEmailClient
from app.application.services.auth_service import Identity, TokenService, get_token_service
from app.application.services import user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserRead])
def list_users(
    repo: UserRepository = Depends(get_user_repository),
    admin: Identity = Depends(require_full_admin),
):
    return user_service.list_users(repo)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    body: UserCreate,
    repo: UserRepository = Depends(get_user_repository),
    caller: Optional[Identity] = Depends(get_identity_if_valid),
):
    return user_service.register_user(repo, body, caller)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    repo: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_token_service),
):
    return user_service.login(repo, tokens, body.email, body.password)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    body: ForgotPasswordRequest,
    repo: UserRepository = Depends(get_user_repository),
    mailer: ResendEmailClient = Depends(get_email_client),
):
    message = user_service.request_password_reset(repo, mailer, body.email)
    return MessageResponse(message=message)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    body: ResetPasswordRequest,
    repo: UserRepository = Depends(get_user_repository),
):
    user_service.reset_password(repo, body)
    return MessageResponse(message="Senha alterada com sucesso.")


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: str,
    repo: UserRepository = Depends(get_user_repository),
    caller: Identity = Depends(get_current_identity),
):
    return user_service.get_user(repo, caller, user_id)


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: str,
    body: UserUpdate,
    repo: UserRepository = Depends(get_user_repository),
    caller: Identity = Depends(get_current_identity),
):
    return user_service.update_user(repo, caller, user_id, body)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    repo: UserRepository = Depends(get_user_repository),
    admin: Identity = Depends(require_full_admin),
):
    user_service.delete_user(repo, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
