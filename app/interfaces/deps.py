"""
API Dependencies.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.domain.models.cart import Cart
from app.domain.models.product import Product
from app.domain.models.user import User
from app.domain.repositories.cart_repository import CartRepository
from app.domain.repositories.product_repository import ProductRepository
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.database import get_db
from app.infrastructure.email import ResendEmailClient
from app.infrastructure.repositories.cart_repository import SQLAlchemyCartRepository
from app.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    """Get product repository instance."""
    return SQLAlchemyProductRepository(db, Product)


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_cart_repository(db: Session = Depends(get_db)) -> CartRepository:
    """Get cart repository instance."""
    return SQLAlchemyCartRepository(db, Cart)


def get_email_client() -> ResendEmailClient:
    return ResendEmailClient()
