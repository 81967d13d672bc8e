from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from app.main import app
from app.domain.models.cart import Cart, CartItem
from app.domain.models.user import Role, User
from app.application.services.auth_service import get_token_service
from app.application.services.user_service import FORGOT_PASSWORD_MESSAGE
from app.infrastructure.email import EmailDeliveryError
from app.interfaces.deps import get_email_client

PASSWORD = "Senha@123"


def register(client, email="maria@lojateste.com.br", password=PASSWORD, **extra):
    return client.post("/users", json={"name": "Maria", "email": email, "password": password, **extra})


def test_register_then_login(client):
    resp = register(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["role"] == "VISITOR"
    assert "password" not in body and "password_hash" not in body

    login = client.post("/users/login", json={"email": "maria@lojateste.com.br", "password": PASSWORD})
    assert login.status_code == 200
    data = login.json()
    assert data["id"] == body["id"]
    assert data["role"] == "VISITOR"

    identity = get_token_service().decode_access_token(data["token"])
    assert identity.id == body["id"]
    assert identity.role is Role.VISITOR


def test_register_rejects_weak_password_with_one_message_per_rule(client):
    resp = register(client, password="senhafraca")
    assert resp.status_code == 400
    errors = resp.json()["error"]["details"]["errors"]
    assert len(errors) == 3


def test_register_validates_fields(client):
    resp = client.post("/users", json={"name": "Al", "email": "not-an-email", "password": PASSWORD})
    assert resp.status_code == 400
    fields = {e["field"] for e in resp.json()["error"]["details"]["errors"]}
    assert fields == {"name", "email"}


def test_register_duplicate_email_conflicts(client):
    assert register(client).status_code == 201
    resp = register(client)
    assert resp.status_code == 409


def test_register_elevated_role_requires_admin_token(client, visitor, admin):
    assert register(client, role="ADMIN").status_code == 403

    _, visitor_headers = visitor
    resp = client.post(
        "/users",
        json={"name": "Editor", "email": "ed@lojateste.com.br", "password": PASSWORD, "role": "EDITOR_ADMIN"},
        headers=visitor_headers,
    )
    assert resp.status_code == 403

    _, admin_headers = admin
    resp = client.post(
        "/users",
        json={"name": "Editor", "email": "ed@lojateste.com.br", "password": PASSWORD, "role": "EDITOR_ADMIN"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["role"] == "EDITOR_ADMIN"


def test_login_failure_is_generic(client, make_user):
    make_user(email="joao@lojateste.com.br")
    wrong_password = client.post("/users/login", json={"email": "joao@lojateste.com.br", "password": "Errada@123"})
    unknown_email = client.post("/users/login", json={"email": "ninguem@lojateste.com.br", "password": PASSWORD})
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json()["error"]["message"] == unknown_email.json()["error"]["message"]


def test_forgot_password_response_does_not_reveal_registration(client, make_user, mailer):
    make_user(email="ana@lojateste.com.br")
    known = client.post("/users/forgot-password", json={"email": "ana@lojateste.com.br"})
    unknown = client.post("/users/forgot-password", json={"email": "fantasma@lojateste.com.br"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json() == {"message": FORGOT_PASSWORD_MESSAGE}
    assert [m["to"] for m in mailer.sent] == ["ana@lojateste.com.br"]


def test_forgot_password_email_failure_is_500(client, make_user):
    class BrokenMailer:
        def send_recovery_code(self, **kwargs):
            raise EmailDeliveryError("provider down")

    make_user(email="ana@lojateste.com.br")
    app.dependency_overrides[get_email_client] = lambda: BrokenMailer()
    resp = TestClient(app, raise_server_exceptions=False).post(
        "/users/forgot-password", json={"email": "ana@lojateste.com.br"}
    )

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "InternalServerError"


def _password_hash(session_factory, email):
    with session_factory() as db:
        return db.query(User).filter(User.email == email).one().password_hash


def test_reset_password_flow(client, make_user, mailer, session_factory):
    make_user(email="ana@lojateste.com.br")
    client.post("/users/forgot-password", json={"email": "ana@lojateste.com.br"})
    code = mailer.sent[0]["code"]

    resp = client.post(
        "/users/reset-password",
        json={"email": "ana@lojateste.com.br", "recovery_code": code, "new_password": "Nova#Senha9"},
    )
    assert resp.status_code == 200

    login = client.post("/users/login", json={"email": "ana@lojateste.com.br", "password": "Nova#Senha9"})
    assert login.status_code == 200

    with session_factory() as db:
        user = db.query(User).filter(User.email == "ana@lojateste.com.br").one()
        assert user.recovery_code is None
        assert user.recovery_code_expires_at is None


def test_reset_password_with_wrong_code_keeps_hash(client, make_user, mailer, session_factory):
    make_user(email="ana@lojateste.com.br")
    client.post("/users/forgot-password", json={"email": "ana@lojateste.com.br"})
    code = mailer.sent[0]["code"]
    wrong = "000000" if code != "000000" else "111111"
    before = _password_hash(session_factory, "ana@lojateste.com.br")

    resp = client.post(
        "/users/reset-password",
        json={"email": "ana@lojateste.com.br", "recovery_code": wrong, "new_password": "Nova#Senha9"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "InvalidOrExpiredCodeException"
    assert _password_hash(session_factory, "ana@lojateste.com.br") == before


def test_reset_password_with_expired_code_keeps_hash(client, make_user, mailer, session_factory):
    make_user(email="ana@lojateste.com.br")
    client.post("/users/forgot-password", json={"email": "ana@lojateste.com.br"})
    code = mailer.sent[0]["code"]
    with session_factory() as db:
        user = db.query(User).filter(User.email == "ana@lojateste.com.br").one()
        user.recovery_code_expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        db.commit()
    before = _password_hash(session_factory, "ana@lojateste.com.br")

    resp = client.post(
        "/users/reset-password",
        json={"email": "ana@lojateste.com.br", "recovery_code": code, "new_password": "Nova#Senha9"},
    )
    assert resp.status_code == 400
    assert _password_hash(session_factory, "ana@lojateste.com.br") == before


def test_list_users_is_full_admin_only(client, visitor, editor, admin):
    assert client.get("/users").status_code == 401
    assert client.get("/users", headers=visitor[1]).status_code == 403
    assert client.get("/users", headers=editor[1]).status_code == 403

    resp = client.get("/users", headers=admin[1])
    assert resp.status_code == 200
    assert len(resp.json()) == 3
    assert all("password_hash" not in u for u in resp.json())


def test_get_user_self_or_admin(client, make_user, auth_header, admin):
    alice = make_user()
    bob = make_user()

    assert client.get(f"/users/{alice}", headers=auth_header(alice, Role.VISITOR)).status_code == 200
    assert client.get(f"/users/{alice}", headers=auth_header(bob, Role.VISITOR)).status_code == 403
    assert client.get(f"/users/{alice}", headers=admin[1]).status_code == 200
    assert client.get("/users/missing", headers=admin[1]).status_code == 404
    assert client.get(f"/users/{alice}").status_code == 401


def test_update_user_profile(client, make_user, auth_header):
    alice = make_user()
    headers = auth_header(alice, Role.VISITOR)

    resp = client.put(f"/users/{alice}", json={"name": "Alice Nova"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Alice Nova"


def test_update_user_email_conflict(client, make_user, auth_header):
    alice = make_user(email="alice@lojateste.com.br")
    make_user(email="bob@lojateste.com.br")

    resp = client.put(
        f"/users/{alice}",
        json={"email": "bob@lojateste.com.br"},
        headers=auth_header(alice, Role.VISITOR),
    )
    assert resp.status_code == 409


def test_only_admin_changes_roles(client, make_user, auth_header, admin):
    alice = make_user()

    resp = client.put(f"/users/{alice}", json={"role": "ADMIN"}, headers=auth_header(alice, Role.VISITOR))
    assert resp.status_code == 403

    resp = client.put(f"/users/{alice}", json={"role": "EDITOR_ADMIN"}, headers=admin[1])
    assert resp.status_code == 200
    assert resp.json()["role"] == "EDITOR_ADMIN"


def test_delete_user_cascades_to_cart(client, make_user, make_product, auth_header, admin, session_factory):
    alice = make_user()
    product_id = make_product()
    headers = auth_header(alice, Role.VISITOR)
    assert client.post("/cart/add", json={"product_id": product_id, "quantity": 1}, headers=headers).status_code == 200

    assert client.delete(f"/users/{alice}", headers=headers).status_code == 403
    resp = client.delete(f"/users/{alice}", headers=admin[1])
    assert resp.status_code == 204

    with session_factory() as db:
        assert db.get(User, alice) is None
        assert db.query(Cart).count() == 0
        assert db.query(CartItem).count() == 0

    assert client.delete(f"/users/{alice}", headers=admin[1]).status_code == 404


def test_email_is_case_insensitive(client):
    resp = register(client, email="maria@Example.COM")
    assert resp.status_code == 201
    assert resp.json()["email"] == "maria@example.com"

    login = client.post("/users/login", json={"email": "maria@Example.COM", "password": PASSWORD})
    assert login.status_code == 200
    assert login.json()["id"] == resp.json()["id"]

    assert register(client, email="Maria@example.com").status_code == 409


def test_register_with_stale_token_is_anonymous(client):
    stale = {"Authorization": "Bearer token-expirado"}
    resp = client.post(
        "/users",
        json={"name": "Maria", "email": "maria@lojateste.com.br", "password": PASSWORD},
        headers=stale,
    )
    assert resp.status_code == 201
    assert resp.json()["role"] == "VISITOR"

    resp = client.post(
        "/users",
        json={"name": "Outra", "email": "outra@lojateste.com.br", "password": PASSWORD, "role": "ADMIN"},
        headers=stale,
    )
    assert resp.status_code == 403
