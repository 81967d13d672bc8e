"""
SQLAlchemy Implementation of Cart Repository.
"""

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload, selectinload

from app.domain.models.cart import Cart, CartItem
from app.domain.repositories.cart_repository import CartRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyCartRepository(SQLAlchemyRepository[Cart], CartRepository):
    """Cart repository implementation using SQLAlchemy."""

    def get_by_user_id(self, user_id: str) -> Optional[Cart]:
        return (
            self.db.query(Cart)
            .options(selectinload(Cart.cart_items).joinedload(CartItem.product))
            .filter(Cart.user_id == user_id)
            .first()
        )

    def get_or_create(self, user_id: str) -> Optional[Cart]:
        """Get-or-create keyed on the unique user_id.

        Must run first in its transaction: a concurrent insert of the same
        cart rolls the whole transaction back before re-reading the winner.
        Returns None when the insert failed because the user row is gone.
        """
        cart = self.db.query(Cart).filter(Cart.user_id == user_id).first()
        if cart:
            return cart

        cart = Cart(user_id=user_id)
        self.db.add(cart)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            cart = self.db.query(Cart).filter(Cart.user_id == user_id).first()
        return cart

    def get_item(self, item_id: str) -> Optional[CartItem]:
        return (
            self.db.query(CartItem)
            .options(joinedload(CartItem.cart), joinedload(CartItem.product))
            .filter(CartItem.id == item_id)
            .first()
        )

    def find_item(self, cart_id: str, product_id: str, for_update: bool = False) -> Optional[CartItem]:
        query = self.db.query(CartItem).filter(
            CartItem.cart_id == cart_id,
            CartItem.product_id == product_id,
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def add_item(self, cart_id: str, product_id: str, quantity: int) -> CartItem:
        item = CartItem(cart_id=cart_id, product_id=product_id, quantity=quantity)
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, item: CartItem) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear_items(self, cart_id: str) -> int:
        removed = (
            self.db.query(CartItem)
            .filter(CartItem.cart_id == cart_id)
            .delete(synchronize_session=False)
        )
        self.db.expire_all()
        return removed

    def list_active(self) -> List[Cart]:
        return (
            self.db.query(Cart)
            .options(
                joinedload(Cart.user),
                selectinload(Cart.cart_items).joinedload(CartItem.product),
            )
            .filter(Cart.cart_items.any())
            .order_by(Cart.created_at.desc())
            .all()
        )

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
