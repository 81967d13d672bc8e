"""
SQLAlchemy Implementation of Product Repository.
"""

from typing import List

from sqlalchemy import func, or_

from app.domain.models.product import Product
from app.domain.repositories.product_repository import ProductRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository
from app.domain.schemas.product import CategorySummary, ProductSummary

UNCATEGORIZED = "Sem categoria"


class SQLAlchemyProductRepository(SQLAlchemyRepository[Product], ProductRepository):
    """Product repository implementation using SQLAlchemy."""

    def list_all(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.created_at.desc(), Product.name).all()

    def search(self, term: str) -> List[Product]:
        """Case-insensitive substring search over the descriptive columns."""
        return (
            self.db.query(Product)
            .filter(
                or_(
                    Product.name.icontains(term, autoescape=True),
                    Product.description.icontains(term, autoescape=True),
                    Product.category.icontains(term, autoescape=True),
                    Product.color.icontains(term, autoescape=True),
                )
            )
            .order_by(Product.name)
            .all()
        )

    def get_for_update(self, id: str) -> Product | None:
        return self.db.query(Product).filter(Product.id == id).with_for_update().first()

    def get_summary(self) -> ProductSummary:
        """Get totals plus count and stock per category, largest first."""
        total = self.db.query(func.count(Product.id)).scalar() or 0
        total_stock = self.db.query(func.coalesce(func.sum(Product.stock), 0)).scalar()

        results = (
            self.db.query(
                Product.category,
                func.count(Product.id).label("count"),
                func.coalesce(func.sum(Product.stock), 0).label("total_stock"),
            )
            .group_by(Product.category)
            .all()
        )

        by_category = [
            CategorySummary(
                category=r.category or UNCATEGORIZED,
                count=r.count,
                total_stock=int(r.total_stock),
            )
            for r in results
        ]
        by_category.sort(key=lambda c: (-c.count, c.category))

        return ProductSummary(
            total_products=total,
            total_stock=int(total_stock),
            products_by_category=by_category,
        )
