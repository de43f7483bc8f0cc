from app.core.auth import hash_password, verify_password
from app.core.config import Settings
from app.repositories.admin_user_repo import AdminUserRepository
from app.services.admin_user_service import AdminUserService

ADMIN_PASSWORD = "s3cret-pass"


def test_password_hash_is_salted_and_verifiable():
    first = hash_password("clave-segura")
    second = hash_password("clave-segura")

    assert first != second
    assert "clave-segura" not in first
    assert verify_password("clave-segura", first)
    assert not verify_password("otra-clave", first)


def test_verify_password_rejects_malformed_hash():
    assert not verify_password("x", "plaintext-not-a-hash")


def test_login_sets_session_and_hides_password(client, make_admin):
    make_admin("admin", password=ADMIN_PASSWORD)

    response = client.post(
        "/api/auth/login",
        json={"username": "admin", "password": ADMIN_PASSWORD},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "admin"
    assert "password" not in body
    assert "password_hash" not in body
    assert "bodega_session" in response.cookies

    session_body = client.get("/api/auth/session").json()
    assert session_body["username"] == "admin"
    assert "password_hash" not in session_body


def test_wrong_password_and_unknown_user_look_the_same(client, make_admin):
    make_admin("admin", password=ADMIN_PASSWORD)

    wrong = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"username": "ghost", "password": "nope"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"detail": "Invalid credentials"}


def test_session_without_cookie_is_401(client):
    response = client.get("/api/auth/session")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


def test_forged_session_cookie_is_401(client):
    client.cookies.set("bodega_session", "forged.token.value")
    assert client.get("/api/auth/session").status_code == 401


def test_logout_clears_session(admin_client):
    assert admin_client.get("/api/auth/session").status_code == 200

    assert admin_client.post("/api/auth/logout").status_code == 204

    assert admin_client.get("/api/auth/session").status_code == 401


def test_bootstrap_admin_is_created_once(session):
    settings = Settings(
        DATABASE_URL="sqlite://",
        SESSION_SECRET="x",
        BOOTSTRAP_ADMIN_USERNAME="owner",
        BOOTSTRAP_ADMIN_EMAIL="owner@example.com",
        BOOTSTRAP_ADMIN_PASSWORD="owner-pass",
    )
    service = AdminUserService(AdminUserRepository())

    created = service.ensure_bootstrap_admin(session, settings)
    assert created.role == "superadmin"
    assert verify_password("owner-pass", created.password_hash)

    assert service.ensure_bootstrap_admin(session, settings) is None
