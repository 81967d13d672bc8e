"""Pydantic schemas for the admin dashboard."""

from pydantic import BaseModel

from app.domain.schemas.cart import CartOverviewRow
from app.domain.schemas.product import ProductSummary


class CartOverview(BaseModel):
    active_carts: int
    total_items: int
    total_value: float
    carts: list[CartOverviewRow]


class UserCounts(BaseModel):
    total: int
    by_role: dict[str, int]


class DashboardRead(BaseModel):
    products: ProductSummary
    carts: CartOverview
    users: UserCounts
