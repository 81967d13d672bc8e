"""
User Repository Interface.
"""

from typing import Dict, List, Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.user import User


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def list_all(self) -> List[User]:
        ...

    def count_by_role(self) -> Dict[str, int]:
        ...
