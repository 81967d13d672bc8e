"""Product service: catalog CRUD, search and summary."""

from typing import List

import structlog

from app.core.exceptions import EntityNotFoundException
from app.domain.models.product import Product
from app.domain.repositories.product_repository import ProductRepository
from app.domain.schemas.product import ProductCreate, ProductSummary, ProductUpdate

logger = structlog.get_logger(__name__)

# Columns that may be omitted from an update but never cleared
REQUIRED_FIELDS = ("name", "price", "stock")


def list_products(repo: ProductRepository) -> List[Product]:
    return repo.list_all()


def search_products(repo: ProductRepository, term: str) -> List[Product]:
    return repo.search(term.strip())


def get_product(repo: ProductRepository, product_id: str) -> Product:
    product = repo.get_by_id(product_id)
    if not product:
        raise EntityNotFoundException("Produto não encontrado")
    return product


def get_product_summary(repo: ProductRepository) -> ProductSummary:
    return repo.get_summary()


def create_product(repo: ProductRepository, body: ProductCreate) -> Product:
    product = repo.create(body.model_dump(mode="json"))
    logger.info("Product created", product_id=product.id, name=product.name)
    return product


def update_product(repo: ProductRepository, product_id: str, body: ProductUpdate) -> Product:
    product = get_product(repo, product_id)
    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True, mode="json").items()
        if value is not None or field not in REQUIRED_FIELDS
    }
    product = repo.update(product, changes)
    logger.info("Product updated", product_id=product_id, fields=sorted(changes))
    return product


def delete_product(repo: ProductRepository, product_id: str) -> str:
    """Delete a product and return its name; cart items referencing it are removed too."""
    name = get_product(repo, product_id).name
    repo.delete(product_id)
    logger.info("Product deleted", product_id=product_id)
    return name
