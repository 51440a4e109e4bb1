import os

# Keep the module-level engine off the developer database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORE_VARIANT", "retail")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import storefront.models  # noqa: F401
from storefront.core.security import create_access_token, get_password_hash
from storefront.db.session import get_session
from storefront.main import app
from storefront.models.catalog import CatalogItem
from storefront.models.user import Role, User

PASSWORD = "Secret123!"


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="make_item")
def make_item_fixture(session):
    def _make_item(name="Wireless Headphones", unit_price="29.99", stock_quantity=10, is_active=True):
        item = CatalogItem(
            name=name,
            unit_price=Decimal(unit_price),
            stock_quantity=stock_quantity,
            is_active=is_active,
        )
        session.add(item)
        session.commit()
        session.refresh(item)
        return item
    return _make_item


def _make_user(session, email, role=Role.USER):
    user = User(email=email, name=email.split("@")[0], password_hash=get_password_hash(PASSWORD), role=role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="customer")
def customer_fixture(session):
    return _make_user(session, "alice@example.com")


@pytest.fixture(name="other_customer")
def other_customer_fixture(session):
    return _make_user(session, "bob@example.com")


@pytest.fixture(name="admin")
def admin_fixture(session):
    return _make_user(session, "admin@example.com", role=Role.ADMIN)


@pytest.fixture(name="client")
def client_fixture(engine):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    # No context manager: the lifespan would create tables on the module engine
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="auth_headers")
def auth_headers_fixture():
    def _auth_headers(user):
        token = create_access_token({"sub": user.email, "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
