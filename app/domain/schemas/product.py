"""Pydantic schemas for Product domain."""

from pydantic import AfterValidator, BaseModel, Field, HttpUrl, TypeAdapter, ValidationError
from datetime import datetime
from typing import Annotated, Optional

_http_url = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    """Accept only http(s) URLs but keep the string exactly as sent."""
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("URL da imagem inválida")
    return value


ImageUrl = Annotated[str, AfterValidator(_check_http_url)]


class ProductBase(BaseModel):
    name: str = Field(min_length=3)
    description: Optional[str] = Field(default=None, min_length=10)
    price: float = Field(gt=0)
    image_url: Optional[ImageUrl] = None
    category: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    stock: int = Field(default=0, ge=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = Field(default=None, min_length=10)
    price: Optional[float] = Field(default=None, gt=0)
    image_url: Optional[ImageUrl] = None
    category: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)


class ProductRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    image_url: Optional[str] = None
    category: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    stock: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CategorySummary(BaseModel):
    category: str
    count: int
    total_stock: int


class ProductSummary(BaseModel):
    total_products: int
    total_stock: int
    products_by_category: list[CategorySummary]
