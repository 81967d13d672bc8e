"""User service: registration, login, profile management and password recovery."""

from typing import List, Optional

import structlog

from app.config import get_settings
from app.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    ForbiddenException,
    InvalidOrExpiredCodeException,
    UnauthorizedException,
    ValidationException,
)
from app.domain.models.user import Role, User
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import LoginResponse, ResetPasswordRequest, UserCreate, UserUpdate
from app.infrastructure.email import ResendEmailClient
from app.application.services.auth_service import (
    Identity,
    TokenService,
    generate_recovery_code,
    hash_password,
    is_recovery_code_valid,
    recovery_code_expiry,
    validate_password_complexity,
    verify_password,
)

settings = get_settings()
logger = structlog.get_logger(__name__)

LOGIN_FAILED_MESSAGE = "Login ou senha incorretos"
FORGOT_PASSWORD_MESSAGE = "Se o e-mail estiver cadastrado, um código de recuperação foi enviado."


def _check_password(password: str) -> None:
    errors = validate_password_complexity(password)
    if errors:
        raise ValidationException("Senha não atende aos requisitos", details={"errors": errors})


def ensure_self_or_admin(caller: Identity, user_id: str, action: str = "acessar") -> None:
    if caller.id != user_id and caller.role != Role.ADMIN:
        raise ForbiddenException(f"Acesso negado: você só pode {action} seu próprio perfil.")


def list_users(repo: UserRepository) -> List[User]:
    return repo.list_all()


def register_user(repo: UserRepository, body: UserCreate, caller: Optional[Identity] = None) -> User:
    """Create a user. Roles above VISITOR need an ADMIN caller."""
    _check_password(body.password)

    role = body.role or Role.VISITOR
    if role != Role.VISITOR and (caller is None or caller.role != Role.ADMIN):
        raise ForbiddenException("Apenas administradores podem criar usuários com papel elevado.")

    if repo.get_by_email(body.email):
        raise ConflictException("E-mail já cadastrado")

    user = repo.create({
        "name": body.name,
        "email": body.email,
        "password_hash": hash_password(body.password),
        "role": role,
    })
    logger.info("User registered", user_id=user.id, role=user.role.value)
    return user


def login(repo: UserRepository, tokens: TokenService, email: str, password: str) -> LoginResponse:
    """Authenticate and issue a token; unknown e-mail and wrong password look the same."""
    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Login failed")
        raise UnauthorizedException(LOGIN_FAILED_MESSAGE)

    token = tokens.create_access_token(user.id, user.role)
    logger.info("Login succeeded", user_id=user.id)
    return LoginResponse(id=user.id, name=user.name, email=user.email, role=user.role, token=token)


def get_user(repo: UserRepository, caller: Identity, user_id: str) -> User:
    ensure_self_or_admin(caller, user_id, "visualizar")
    user = repo.get_by_id(user_id)
    if not user:
        raise EntityNotFoundException("Usuário não encontrado")
    return user


def update_user(repo: UserRepository, caller: Identity, user_id: str, body: UserUpdate) -> User:
    ensure_self_or_admin(caller, user_id, "atualizar")
    user = repo.get_by_id(user_id)
    if not user:
        raise EntityNotFoundException("Usuário não encontrado")

    changes = {}
    if body.name:
        changes["name"] = body.name
    if body.email and body.email != user.email:
        existing = repo.get_by_email(body.email)
        if existing and existing.id != user_id:
            raise ConflictException("E-mail já cadastrado para outro usuário")
        changes["email"] = body.email
    if body.password:
        _check_password(body.password)
        changes["password_hash"] = hash_password(body.password)
    if body.role and body.role != user.role:
        if caller.role != Role.ADMIN:
            raise ForbiddenException("Apenas administradores podem alterar o papel de um usuário.")
        changes["role"] = body.role

    if not changes:
        return user

    user = repo.update(user, changes)
    logger.info("User updated", user_id=user_id, fields=sorted(changes))
    return user


def delete_user(repo: UserRepository, user_id: str) -> None:
    """Delete a user; the cart and its items go with it."""
    user = repo.delete(user_id)
    if not user:
        raise EntityNotFoundException("Usuário não encontrado")
    logger.info("User deleted", user_id=user_id)


def request_password_reset(repo: UserRepository, mailer: ResendEmailClient, email: str) -> str:
    """Issue a recovery code when the e-mail is known; the reply never tells which case happened."""
    user = repo.get_by_email(email)
    if not user:
        logger.info("Password reset requested for unknown e-mail")
        return FORGOT_PASSWORD_MESSAGE

    code = generate_recovery_code()
    repo.update(user, {"recovery_code": code, "recovery_code_expires_at": recovery_code_expiry()})
    mailer.send_recovery_code(
        to=user.email,
        name=user.name,
        code=code,
        expires_minutes=settings.RECOVERY_CODE_EXPIRATION_MINUTES,
    )
    logger.info("Recovery code issued", user_id=user.id)
    return FORGOT_PASSWORD_MESSAGE


def reset_password(repo: UserRepository, body: ResetPasswordRequest) -> None:
    _check_password(body.new_password)

    user = repo.get_by_email(body.email)
    if not user or not is_recovery_code_valid(
        user.recovery_code, user.recovery_code_expires_at, body.recovery_code
    ):
        raise InvalidOrExpiredCodeException()

    repo.update(user, {
        "password_hash": hash_password(body.new_password),
        "recovery_code": None,
        "recovery_code_expires_at": None,
    })
    logger.info("Password reset", user_id=user.id)
