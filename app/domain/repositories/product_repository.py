"""
Product Repository Interface.
Defines specific data access operations for Products.
"""

from typing import List

from app.domain.repositories.base import BaseRepository
from app.domain.models.product import Product
from app.domain.schemas.product import ProductSummary


class ProductRepository(BaseRepository[Product]):
    """Interface for Product-specific operations."""

    def list_all(self) -> List[Product]:
        """Get every product in the catalog."""
        ...

    def search(self, term: str) -> List[Product]:
        """Case-insensitive substring match on name, description, category or color."""
        ...

    def get_summary(self) -> ProductSummary:
        """Get totals and per-category breakdown for the admin dashboard."""
        ...

    def get_for_update(self, id: str) -> Product | None:
        """Get a product, locking its row until the transaction ends."""
        ...
