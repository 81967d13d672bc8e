"""Cart service: per-user cart mutations and admin cart views.

A cart moves from "no cart" to "cart with items" on the first add, and
back to an empty item list on checkout or admin clear; the cart row
itself is never deleted by these flows.
"""

from typing import List

import structlog

from app.core.exceptions import (
    EntityNotFoundException,
    ForbiddenException,
    InsufficientStockException,
)
from app.domain.models.cart import Cart, CartItem
from app.domain.models.product import Product
from app.domain.models.user import Role
from app.domain.repositories.cart_repository import CartRepository
from app.domain.repositories.product_repository import ProductRepository
from app.domain.schemas.cart import AddToCartRequest, CartOverviewRow, CartRead
from app.domain.schemas.dashboard import CartOverview
from app.application.services.auth_service import Identity

logger = structlog.get_logger(__name__)


def _insufficient_stock(product: Product) -> InsufficientStockException:
    return InsufficientStockException(
        f"Estoque insuficiente para {product.name}. Disponível: {product.stock}",
        details={"product_id": product.id, "available": product.stock},
    )


def _ensure_owner_or_admin(caller: Identity, item: CartItem) -> None:
    if item.cart.user_id != caller.id and caller.role != Role.ADMIN:
        raise ForbiddenException("Acesso negado.")


def get_cart(repo: CartRepository, caller: Identity) -> CartRead:
    """Return the caller's cart, or an id-less empty cart when none exists yet."""
    cart = repo.get_by_user_id(caller.id)
    if not cart:
        return CartRead(id=None, user_id=caller.id, cart_items=[])
    return CartRead.model_validate(cart)


def add_to_cart(
    repo: CartRepository,
    products: ProductRepository,
    caller: Identity,
    body: AddToCartRequest,
) -> CartItem:
    """Add a quantity of a product, merging into the existing line.

    Cart get-or-create, the item lookup and the quantity write share one
    transaction, with the product and item rows locked where the database
    supports it. Stock is checked against the merged quantity.
    """
    product_id = str(body.product_id)
    try:
        cart = repo.get_or_create(caller.id)
        if cart is None:
            raise EntityNotFoundException("Usuário não encontrado")

        product = products.get_for_update(product_id)
        if not product:
            raise EntityNotFoundException("Produto não encontrado")

        item = repo.find_item(cart.id, product.id, for_update=True)
        current = item.quantity if item else 0
        if current + body.quantity > product.stock:
            raise _insufficient_stock(product)

        if item:
            item.quantity = current + body.quantity
        else:
            item = repo.add_item(cart.id, product.id, body.quantity)
        repo.commit()
    except Exception:
        repo.rollback()
        raise

    logger.info(
        "Cart item added",
        user_id=caller.id,
        product_id=product_id,
        added=body.quantity,
        quantity=item.quantity,
    )
    return item


def update_item_quantity(repo: CartRepository, caller: Identity, item_id: str, quantity: int) -> CartItem:
    item = repo.get_item(item_id)
    if not item:
        raise EntityNotFoundException("Item do carrinho não encontrado")
    _ensure_owner_or_admin(caller, item)
    if quantity > item.product.stock:
        raise _insufficient_stock(item.product)

    item.quantity = quantity
    repo.commit()
    logger.info("Cart item updated", item_id=item_id, quantity=quantity)
    return item


def remove_item(repo: CartRepository, caller: Identity, item_id: str) -> None:
    item = repo.get_item(item_id)
    if not item:
        raise EntityNotFoundException("Item do carrinho não encontrado")
    _ensure_owner_or_admin(caller, item)

    repo.delete_item(item)
    repo.commit()
    logger.info("Cart item removed", item_id=item_id)


def _clear(repo: CartRepository, user_id: str, not_found_message: str) -> int:
    cart = repo.get_by_user_id(user_id)
    if not cart:
        raise EntityNotFoundException(not_found_message)
    removed = repo.clear_items(cart.id)
    repo.commit()
    return removed


def checkout(repo: CartRepository, caller: Identity) -> None:
    """Empty the caller's cart. Product stock is left as it is."""
    removed = _clear(repo, caller.id, "Carrinho não encontrado.")
    logger.info("Checkout completed", user_id=caller.id, items_removed=removed)


def clear_user_cart(repo: CartRepository, user_id: str) -> None:
    removed = _clear(repo, user_id, "Carrinho do usuário não encontrado.")
    logger.info("Cart cleared by admin", user_id=user_id, items_removed=removed)


def list_active_carts(repo: CartRepository) -> List[Cart]:
    return repo.list_active()


def get_cart_overview(repo: CartRepository) -> CartOverview:
    """Per-cart totals for the admin dashboard."""
    rows = []
    for cart in repo.list_active():
        rows.append(CartOverviewRow(
            id=cart.id,
            user_id=cart.user_id,
            user_name=cart.user.name,
            user_email=cart.user.email,
            total_items=sum(i.quantity for i in cart.cart_items),
            total_price=round(sum(i.quantity * i.product.price for i in cart.cart_items), 2),
            created_at=cart.created_at,
        ))

    return CartOverview(
        active_carts=len(rows),
        total_items=sum(r.total_items for r in rows),
        total_value=round(sum(r.total_price for r in rows), 2),
        carts=rows,
    )
