import uuid

from sqlmodel import select

from app.core.auth import verify_password
from app.models.admin_user import AdminUser

NEW_USER = {
    "username": "cajero",
    "email": "cajero@example.com",
    "password": "caja-1234",
    "role": "admin",
}


def test_requires_superadmin(admin_client):
    assert admin_client.get("/api/admin/users").status_code == 403


def test_requires_session(client):
    assert client.get("/api/admin/users").status_code == 401


def test_create_user_hashes_password(superadmin_client, session):
    response = superadmin_client.post("/api/admin/users", json=NEW_USER)

    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "cajero"
    assert "password" not in body
    assert "password_hash" not in body

    stored = session.exec(select(AdminUser).where(AdminUser.username == "cajero")).one()
    assert stored.password_hash != "caja-1234"
    assert verify_password("caja-1234", stored.password_hash)


def test_created_user_can_log_in(superadmin_client, client):
    superadmin_client.post("/api/admin/users", json=NEW_USER)

    response = client.post(
        "/api/auth/login",
        json={"username": "cajero", "password": "caja-1234"},
    )
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


def test_duplicate_username_or_email_conflicts(superadmin_client):
    superadmin_client.post("/api/admin/users", json=NEW_USER)

    same_name = {**NEW_USER, "email": "otro@example.com"}
    same_email = {**NEW_USER, "username": "otro"}

    assert superadmin_client.post("/api/admin/users", json=same_name).status_code == 409
    assert superadmin_client.post("/api/admin/users", json=same_email).status_code == 409


def test_user_input_is_validated(superadmin_client):
    short_password = {**NEW_USER, "password": "123"}
    bad_role = {**NEW_USER, "role": "owner"}
    bad_email = {**NEW_USER, "email": "nope"}

    assert superadmin_client.post("/api/admin/users", json=short_password).status_code == 422
    assert superadmin_client.post("/api/admin/users", json=bad_role).status_code == 422
    assert superadmin_client.post("/api/admin/users", json=bad_email).status_code == 422


def test_list_update_and_delete(superadmin_client, session):
    created = superadmin_client.post("/api/admin/users", json=NEW_USER).json()

    names = [u["username"] for u in superadmin_client.get("/api/admin/users").json()]
    assert set(names) == {"root", "cajero"}

    response = superadmin_client.put(
        f"/api/admin/users/{created['id']}",
        json={"role": "superadmin", "password": "nueva-clave"},
    )
    assert response.status_code == 200
    assert response.json()["role"] == "superadmin"

    stored = session.get(AdminUser, uuid.UUID(created["id"]))
    session.refresh(stored)
    assert verify_password("nueva-clave", stored.password_hash)

    assert superadmin_client.delete(f"/api/admin/users/{created['id']}").status_code == 204
    assert superadmin_client.get(f"/api/admin/users/{created['id']}").status_code == 404


def test_superadmin_cannot_delete_self(superadmin_client):
    me = superadmin_client.get("/api/auth/session").json()
    response = superadmin_client.delete(f"/api/admin/users/{me['id']}")
    assert response.status_code == 400


def test_last_superadmin_cannot_be_demoted(superadmin_client, session):
    me = superadmin_client.get("/api/auth/session").json()

    response = superadmin_client.put(f"/api/admin/users/{me['id']}", json={"role": "admin"})

    assert response.status_code == 400
    stored = session.get(AdminUser, uuid.UUID(me["id"]))
    session.refresh(stored)
    assert stored.role == "superadmin"


def test_superadmin_can_be_demoted_when_another_remains(superadmin_client, make_admin):
    other = make_admin("jefe", role="superadmin")

    response = superadmin_client.put(f"/api/admin/users/{other.id}", json={"role": "admin"})

    assert response.status_code == 200
    assert response.json()["role"] == "admin"
