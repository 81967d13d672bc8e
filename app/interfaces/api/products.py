"""Products API routes: public catalog, search, summary and admin CRUD.

Literal paths (/summary, /search/{term}) are registered before /{product_id}
so a segment like "summary" never reaches the id lookup.
"""

from fastapi import APIRouter, Depends, status

from app.interfaces.api.deps import require_editor_admin, require_full_admin
from app.interfaces.deps import get_product_repository
from app.domain.repositories.product_repository import ProductRepository
from app.domain.schemas.auth import MessageResponse
from app.domain.schemas.product import ProductCreate, ProductRead, ProductSummary, ProductUpdate
from app.application.services.auth_service import Identity
from app.application.services import product_service

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[ProductRead])
def list_products(repo: ProductRepository = Depends(get_product_repository)):
    return product_service.list_products(repo)


@router.get("/summary", response_model=ProductSummary)
def product_summary(
    repo: ProductRepository = Depends(get_product_repository),
    user: Identity = Depends(require_editor_admin),
):
    """Totals and per-category breakdown for the admin dashboard."""
    return product_service.get_product_summary(repo)


@router.get("/search/{term}", response_model=list[ProductRead])
def search_products(term: str, repo: ProductRepository = Depends(get_product_repository)):
    return product_service.search_products(repo, term)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: str, repo: ProductRepository = Depends(get_product_repository)):
    return product_service.get_product(repo, product_id)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    repo: ProductRepository = Depends(get_product_repository),
    user: Identity = Depends(require_editor_admin),
):
    return product_service.create_product(repo, body)


@router.put("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: str,
    body: ProductUpdate,
    repo: ProductRepository = Depends(get_product_repository),
    user: Identity = Depends(require_editor_admin),
):
    return product_service.update_product(repo, product_id, body)


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: str,
    repo: ProductRepository = Depends(get_product_repository),
    user: Identity = Depends(require_full_admin),
):
    name = product_service.delete_product(repo, product_id)
    return MessageResponse(message=f"Produto {name} deletado com sucesso.")
