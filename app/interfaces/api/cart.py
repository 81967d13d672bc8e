"""Cart API routes: every route needs a token; admin routes add a role gate."""

from fastapi import APIRouter, Depends

from app.interfaces.api.deps import get_current_identity, require_editor_admin, require_full_admin
from app.interfaces.deps import get_cart_repository, get_product_repository
from app.domain.repositories.cart_repository import CartRepository
from app.domain.repositories.product_repository import ProductRepository
from app.domain.schemas.auth import MessageResponse
from app.domain.schemas.cart import (
    AddToCartRequest,
    AdminCartRead,
    CartItemBase,
    CartItemMutation,
    CartRead,
    UpdateCartItemRequest,
)
from app.application.services.auth_service import Identity
from app.application.services import cart_service

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartRead)
def get_cart(
    repo: CartRepository = Depends(get_cart_repository),
    caller: Identity = Depends(get_current_identity),
):
    return cart_service.get_cart(repo, caller)


@router.post("/add", response_model=CartItemMutation)
def add_to_cart(
    body: AddToCartRequest,
    repo: CartRepository = Depends(get_cart_repository),
    products: ProductRepository = Depends(get_product_repository),
    caller: Identity = Depends(get_current_identity),
):
    item = cart_service.add_to_cart(repo, products, caller, body)
    return CartItemMutation(
        message="Item adicionado ao carrinho",
        cart_item=CartItemBase.model_validate(item),
    )


@router.put("/update/{cart_item_id}", response_model=CartItemMutation)
def update_cart_item(
    cart_item_id: str,
    body: UpdateCartItemRequest,
    repo: CartRepository = Depends(get_cart_repository),
    caller: Identity = Depends(get_current_identity),
):
    item = cart_service.update_item_quantity(repo, caller, cart_item_id, body.quantity)
    return CartItemMutation(
        message="Quantidade do item atualizada",
        cart_item=CartItemBase.model_validate(item),
    )


@router.delete("/remove/{cart_item_id}", response_model=MessageResponse)
def remove_cart_item(
    cart_item_id: str,
    repo: CartRepository = Depends(get_cart_repository),
    caller: Identity = Depends(get_current_identity),
):
    cart_service.remove_item(repo, caller, cart_item_id)
    return MessageResponse(message="Item removido do carrinho")


@router.post("/checkout", response_model=MessageResponse)
def checkout(
    repo: CartRepository = Depends(get_cart_repository),
    caller: Identity = Depends(get_current_identity),
):
    cart_service.checkout(repo, caller)
    return MessageResponse(message="Compra finalizada com sucesso! Carrinho esvaziado.")


@router.get("/admin/all", response_model=list[AdminCartRead])
def list_all_carts(
    repo: CartRepository = Depends(get_cart_repository),
    user: Identity = Depends(require_editor_admin),
):
    """Non-empty carts of every user, newest first."""
    return cart_service.list_active_carts(repo)


@router.delete("/admin/clear/{user_id}", response_model=MessageResponse)
def clear_user_cart(
    user_id: str,
    repo: CartRepository = Depends(get_cart_repository),
    admin: Identity = Depends(require_full_admin),
):
    cart_service.clear_user_cart(repo, user_id)
    return MessageResponse(message=f"Carrinho do usuário {user_id} esvaziado com sucesso.")
