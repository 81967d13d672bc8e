"""Auth service: JWT token management, password hashing and recovery codes."""

import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.domain.models.user import Role

settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

PASSWORD_MIN_LENGTH = 8
RECOVERY_CODE_BYTES = 3  # 6 hex characters

_PASSWORD_RULES = [
    (re.compile(r"[a-z]"), "Erro... senha deve possuir letra(s) minúscula(s)"),
    (re.compile(r"[A-Z]"), "Erro... senha deve possuir letra(s) maiúscula(s)"),
    (re.compile(r"[0-9]"), "Erro... senha deve possuir número(s)"),
    (re.compile(r"[^a-zA-Z0-9]"), "Erro... senha deve possuir símbolo(s)"),
]


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def validate_password_complexity(password: str) -> list[str]:
    """Return one message per unmet rule; an empty list means the password is accepted."""
    messages = []
    if len(password) < PASSWORD_MIN_LENGTH:
        messages.append(f"Erro... senha deve possuir, no mínimo, {PASSWORD_MIN_LENGTH} caracteres")
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(password):
            messages.append(message)
    return messages


def generate_recovery_code() -> str:
    return secrets.token_hex(RECOVERY_CODE_BYTES).upper()


def recovery_code_expiry(now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now + timedelta(minutes=settings.RECOVERY_CODE_EXPIRATION_MINUTES)


def is_recovery_code_valid(
    stored_code: Optional[str],
    expires_at: Optional[datetime],
    candidate: str,
    now: Optional[datetime] = None,
) -> bool:
    if not stored_code or not expires_at:
        return False
    # SQLite hands back naive datetimes; they were written as UTC.
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if expires_at < now:
        return False
    return secrets.compare_digest(stored_code, candidate.strip().upper())


@dataclass(frozen=True)
class Identity:
    """Caller identity decoded from a verified token."""

    id: str
    role: Role


class TokenService:
    """Issues and verifies signed access tokens with an injected secret."""

    def __init__(self, secret: str, algorithm: str = "HS256", expiration_minutes: int = 60):
        if not secret:
            raise RuntimeError("Token secret is not configured")
        self._secret = secret
        self.algorithm = algorithm
        self.expiration_minutes = expiration_minutes

    def create_access_token(self, user_id: str, role: Role, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self.expiration_minutes)
        )
        to_encode = {"sub": user_id, "id": user_id, "role": Role(role).value, "exp": expire}
        return jwt.encode(to_encode, self._secret, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> Optional[Identity]:
        """Return the payload, or None when the signature, expiry or claims are bad."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError:
            return None

        user_id = payload.get("id") or payload.get("sub")
        try:
            role = Role(payload.get("role"))
        except ValueError:
            return None
        if not user_id:
            return None
        return Identity(id=str(user_id), role=role)


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        secret=settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expiration_minutes=settings.JWT_EXPIRATION_MINUTES,
    )
