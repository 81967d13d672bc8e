"""FastAPI application: main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.config import get_settings
from app.infrastructure.database import Base, SessionLocal, engine, get_db
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.core.exceptions import AppError, global_exception_handler, validation_exception_handler

# Import all models so SQLAlchemy knows about them
from app.domain.models.user import Role, User
from app.domain.models.product import Product
from app.domain.models.cart import Cart, CartItem

from app.interfaces.api.users import router as users_router
from app.interfaces.api.products import router as products_router
from app.interfaces.api.cart import router as cart_router
from app.interfaces.api.dashboard import router as dashboard_router

settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)


def seed_default_admin(db: Session) -> None:
    """Create the configured admin account when it does not exist yet."""
    from app.application.services.auth_service import hash_password
    from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

    if not settings.DEFAULT_ADMIN_PASSWORD:
        return

    repo = SQLAlchemyUserRepository(db, User)
    if repo.get_by_email(settings.DEFAULT_ADMIN_EMAIL):
        return

    repo.create({
        "name": "Admin",
        "email": settings.DEFAULT_ADMIN_EMAIL.lower(),
        "password_hash": hash_password(settings.DEFAULT_ADMIN_PASSWORD),
        "role": Role.ADMIN,
    })
    logger.info("Default admin user created", email=settings.DEFAULT_ADMIN_EMAIL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    from app.application.services.auth_service import get_token_service

    logger.info("Starting shop API...", env=settings.ENVIRONMENT)

    # Fail fast when the signing secret is unusable
    get_token_service()

    # Create DB tables (dev only, use migrations in production)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    db = SessionLocal()
    try:
        seed_default_admin(db)
    finally:
        db.close()

    yield

    logger.info("Shop API stopped")


app = FastAPI(
    title="Loja de Roupas API",
    description="API de e-commerce: usuários, produtos, carrinho e painel administrativo",
    version="1.0.0",
    lifespan=lifespan,
)

setup_middleware(app)

app.add_exception_handler(AppError, global_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS is added last so it runs first (Starlette executes middleware LIFO)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users_router)
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(dashboard_router)


@app.get("/")
def root(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {
        "name": "Loja de Roupas API",
        "version": "1.0.0",
        "status": "running",
        "database": "ok",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
