"""FastAPI dependencies: bearer token check and role gates."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.domain.models.user import Role
from app.application.services.auth_service import Identity, TokenService, get_token_service

# auto_error=False so a missing header becomes our own 401 body
security = HTTPBearer(auto_error=False)


def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[Identity]:
    """Decode the bearer token when one is sent; anonymous callers get None."""
    if credentials is None:
        return None

    identity = tokens.decode_access_token(credentials.credentials)
    if identity is None:
        raise UnauthorizedException("Token inválido ou expirado.")
    return identity


def get_identity_if_valid(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[Identity]:
    """For public routes: a missing or unusable token means an anonymous caller."""
    if credentials is None:
        return None
    return tokens.decode_access_token(credentials.credentials)


def get_current_identity(identity: Optional[Identity] = Depends(get_optional_identity)) -> Identity:
    """Require a valid bearer token."""
    if identity is None:
        raise UnauthorizedException("Acesso negado. Token não fornecido.")
    return identity


def require_editor_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """ADMIN or EDITOR_ADMIN."""
    if not identity.role.at_least(Role.EDITOR_ADMIN):
        raise ForbiddenException(
            "Acesso negado: Requer privilégios de administrador ou editor para esta operação."
        )
    return identity


def require_full_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """ADMIN only."""
    if not identity.role.at_least(Role.ADMIN):
        raise ForbiddenException(
            "Acesso negado: Requer privilégios de administrador completo para esta operação."
        )
    return identity
