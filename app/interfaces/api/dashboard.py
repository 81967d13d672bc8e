"""Dashboard API: aggregated product, cart and user data for the admin page."""

from fastapi import APIRouter, Depends

from app.interfaces.api.deps import require_editor_admin
from app.interfaces.deps import get_cart_repository, get_product_repository, get_user_repository
from app.domain.repositories.cart_repository import CartRepository
from app.domain.repositories.product_repository import ProductRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.dashboard import DashboardRead, UserCounts
from app.application.services.auth_service import Identity
from app.application.services.cart_service import get_cart_overview
from app.application.services.product_service import get_product_summary

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardRead)
def dashboard(
    products: ProductRepository = Depends(get_product_repository),
    carts: CartRepository = Depends(get_cart_repository),
    users: UserRepository = Depends(get_user_repository),
    user: Identity = Depends(require_editor_admin),
):
    """Everything the admin dashboard renders, in one request."""
    return DashboardRead(
        products=get_product_summary(products),
        carts=get_cart_overview(carts),
        users=UserCounts(total=users.count(), by_role=users.count_by_role()),
    )
