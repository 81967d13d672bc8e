"""Create a full admin, or promote an existing account to ADMIN.

Usage: python scripts/create_admin.py <email> [name]
The password is prompted for when the account does not exist yet.
"""

import getpass
import os
import sys

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.infrastructure.database import Base, SessionLocal, engine
from app.domain.models.user import Role, User
from app.domain.models.product import Product  # noqa: F401
from app.domain.models.cart import Cart, CartItem  # noqa: F401
from app.application.services.auth_service import hash_password, validate_password_complexity
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def create_admin(email: str, name: str = "Admin") -> int:
    email = email.strip().lower()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        repo = SQLAlchemyUserRepository(db, User)
        user = repo.get_by_email(email)
        if user:
            if user.role == Role.ADMIN:
                print(f"{email} já é ADMIN.")
                return 0
            repo.update(user, {"role": Role.ADMIN})
            print(f"{email} promovido a ADMIN.")
            return 0

        password = getpass.getpass("Senha: ")
        errors = validate_password_complexity(password)
        if errors:
            for message in errors:
                print(message)
            return 1

        repo.create({
            "name": name,
            "email": email,
            "password_hash": hash_password(password),
            "role": Role.ADMIN,
        })
        print(f"Administrador {email} criado.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(create_admin(sys.argv[1], *sys.argv[2:3]))
