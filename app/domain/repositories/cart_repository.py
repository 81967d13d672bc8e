"""
Cart Repository Interface.

Mutating helpers flush without committing so a service can run a
multi-step cart change as one transaction and finish with commit().
"""

from typing import List, Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.cart import Cart, CartItem


class CartRepository(BaseRepository[Cart]):
    """Interface for Cart and CartItem operations."""

    def get_by_user_id(self, user_id: str) -> Optional[Cart]:
        """Get a user's cart with items and products loaded."""
        ...

    def get_or_create(self, user_id: str) -> Optional[Cart]:
        """Return the user's cart, creating it when absent; None when the user no longer exists."""
        ...

    def get_item(self, item_id: str) -> Optional[CartItem]:
        """Get a cart item with its cart and product loaded."""
        ...

    def find_item(self, cart_id: str, product_id: str, for_update: bool = False) -> Optional[CartItem]:
        """Get the item for a (cart, product) pair."""
        ...

    def add_item(self, cart_id: str, product_id: str, quantity: int) -> CartItem:
        ...

    def delete_item(self, item: CartItem) -> None:
        ...

    def clear_items(self, cart_id: str) -> int:
        """Delete all items of a cart, returning how many were removed."""
        ...

    def list_active(self) -> List[Cart]:
        """Carts with at least one item, newest first."""
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...
