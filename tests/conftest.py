"""Shared fixtures: fresh in-memory database per test and a TestClient wired to it."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("DEFAULT_ADMIN_PASSWORD", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.infrastructure.database import Base, build_engine, get_db
from app.interfaces.deps import get_email_client
from app.domain.models.user import Role, User
from app.domain.models.product import Product
from app.application.services.auth_service import get_token_service, hash_password

PASSWORD = "Senha@123"


class FakeMailer:
    """Records recovery codes instead of calling the provider."""

    def __init__(self):
        self.sent = []

    def send_recovery_code(self, to, name, code, expires_minutes):
        self.sent.append({"to": to, "name": name, "code": code, "expires_minutes": expires_minutes})
        return "fake-id"


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(session_factory, mailer):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_client] = lambda: mailer
    with_client = TestClient(app)
    yield with_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """Insert a user directly and return its id."""
    counter = {"n": 0}

    def _make(role=Role.VISITOR, email=None, name="Usuário Teste", password=PASSWORD):
        counter["n"] += 1
        email = email or f"user{counter['n']}@lojateste.com.br"
        with session_factory() as db:
            user = User(name=name, email=email, password_hash=hash_password(password), role=role)
            db.add(user)
            db.commit()
            return user.id

    return _make


@pytest.fixture
def auth_header():
    def _header(user_id, role):
        token = get_token_service().create_access_token(user_id, role)
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
def make_product(session_factory):
    def _make(**fields):
        data = {"name": "Camiseta Básica", "price": 49.9, "stock": 10, "category": "Camisetas"}
        data.update(fields)
        with session_factory() as db:
            product = Product(**data)
            db.add(product)
            db.commit()
            return product.id

    return _make


@pytest.fixture
def visitor(make_user, auth_header):
    user_id = make_user(Role.VISITOR)
    return user_id, auth_header(user_id, Role.VISITOR)


@pytest.fixture
def editor(make_user, auth_header):
    user_id = make_user(Role.EDITOR_ADMIN)
    return user_id, auth_header(user_id, Role.EDITOR_ADMIN)


@pytest.fixture
def admin(make_user, auth_header):
    user_id = make_user(Role.ADMIN)
    return user_id, auth_header(user_id, Role.ADMIN)
