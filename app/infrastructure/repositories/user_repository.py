"""
SQLAlchemy Implementation of User Repository.
"""

from typing import Dict, List, Optional

from sqlalchemy import func

from app.domain.models.user import Role, User
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive e-mail lookup."""
        return self.db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def list_all(self) -> List[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.name).all()

    def count_by_role(self) -> Dict[str, int]:
        counts = {role.value: 0 for role in Role}
        rows = self.db.query(User.role, func.count(User.id)).group_by(User.role).all()
        for role, count in rows:
            counts[Role(role).value] = count
        return counts
