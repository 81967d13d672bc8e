"""Pydantic schemas for Cart domain."""

from uuid import UUID
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.domain.schemas.auth import UserSummary


class AddToCartRequest(BaseModel):
    product_id: UUID
    quantity: int = Field(ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=1)


class CartProduct(BaseModel):
    id: str
    name: str
    price: float
    image_url: Optional[str] = None
    stock: Optional[int] = None

    model_config = {"from_attributes": True}


class CartItemBase(BaseModel):
    id: str
    cart_id: str
    product_id: str
    quantity: int

    model_config = {"from_attributes": True}


class CartItemRead(CartItemBase):
    product: CartProduct


class CartRead(BaseModel):
    id: Optional[str] = None
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    cart_items: list[CartItemRead] = []

    model_config = {"from_attributes": True}


class AdminCartRead(CartRead):
    user: UserSummary


class CartItemMutation(BaseModel):
    message: str
    cart_item: CartItemBase


class CartOverviewRow(BaseModel):
    id: str
    user_id: str
    user_name: str
    user_email: str
    total_items: int
    total_price: float
    created_at: Optional[datetime] = None
