"""
Pytest configuration and fixtures.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_EMAIL"] = "admin@store.test"
os.environ["ADMIN_PASSWORD"] = "admin-pass-123"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.api import deps
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import ProductModel
from storefront.domain.schemas import SignUpIn
from storefront.main import app
from storefront.repos.user_repo import UserRepo
from storefront.services.auth_service import AuthService
from storefront.services.cart_store import CartStore


class MemoryStorage:
    """Cart storage double keeping raw strings in a dict."""

    def __init__(self):
        self.data = {}

    def read(self, key):
        return self.data.get(key)

    def write(self, key, raw):
        self.data[key] = raw

    def delete(self, key):
        self.data.pop(key, None)


class FakeLock:
    """SET NX semantics without redis."""

    def __init__(self):
        self.held = {}
        self.acquired = []

    def acquire(self, name, owner, ttl):
        if name in self.held:
            return False
        self.held[name] = owner
        self.acquired.append(name)
        return True

    def release(self, name, owner):
        if self.held.get(name) == owner:
            del self.held[name]
            return True
        return False


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def send_submission_notification(self, kind, record_id, email):
        self.sent.append((kind, record_id, email))


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def lock():
    return FakeLock()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def cart(storage):
    return CartStore(storage, "cart:test").load()


@pytest.fixture
def make_product(db):
    def _make(name="Product", price="1000", in_stock=True, category_id=None):
        product = ProductModel(name=name, price=Decimal(price), in_stock=in_stock, category_id=category_id)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def shopper(db):
    AuthService(db).sign_up(SignUpIn(email="ada@example.com", password="secret-pass", full_name="Ada Obi"))
    return UserRepo(db).get_by_email("ada@example.com")


@pytest.fixture
def client(storage, lock, notifier):
    app.dependency_overrides[deps.get_cart_storage] = lambda: storage
    app.dependency_overrides[deps.get_lock_service] = lambda: lock
    app.dependency_overrides[deps.get_notification_service] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    client.post(
        "/auth/sign-up",
        json={"email": "ada@example.com", "password": "secret-pass", "full_name": "Ada Obi"},
    )
    resp = client.post("/auth/sign-in", json={"email": "ada@example.com", "password": "secret-pass"})
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    resp = client.post(
        "/auth/admin/sign-in",
        json={"email": "admin@store.test", "password": "admin-pass-123"},
    )
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
