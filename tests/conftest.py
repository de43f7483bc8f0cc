import os

# Settings are read once at import time; configure before importing the app.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["EXCHANGE_RATE_URL"] = ""

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from app.core.auth import hash_password  # noqa: E402
from app.database import get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.models.admin_user import AdminUser  # noqa: E402
from app.models.category import Category  # noqa: E402
from app.models.product import Product  # noqa: E402

ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="make_category")
def make_category_fixture(session: Session):
    def make(name: str = "Viveres", enabled: bool = True, ley_seca: bool = False) -> Category:
        category = Category(name=name, enabled=enabled, ley_seca=ley_seca)
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    return make


@pytest.fixture(name="make_product")
def make_product_fixture(session: Session):
    def make(
        category: Category,
        name: str = "Harina PAN",
        price: str = "1.50",
        measurement_type: str = "unit",
        **extra,
    ) -> Product:
        product = Product(
            name=name,
            price=Decimal(price),
            category_id=category.id,
            measurement_type=measurement_type,
            **extra,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return make


@pytest.fixture(name="make_admin")
def make_admin_fixture(session: Session):
    def make(username: str = "admin", role: str = "admin", password: str = ADMIN_PASSWORD) -> AdminUser:
        user = AdminUser(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return make


@pytest.fixture(name="admin_client")
def admin_client_fixture(client: TestClient, make_admin):
    """Client holding a logged-in admin session cookie."""
    make_admin("admin", role="admin")
    response = client.post(
        "/api/auth/login",
        json={"username": "admin", "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client


@pytest.fixture(name="superadmin_client")
def superadmin_client_fixture(client: TestClient, make_admin):
    make_admin("root", role="superadmin")
    response = client.post(
        "/api/auth/login",
        json={"username": "root", "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client
