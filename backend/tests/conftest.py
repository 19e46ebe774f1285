"""
Pytest fixtures for the storefront API tests.

Every test gets a fresh in-memory SQLite schema shared by the test session
and the app's request sessions through a StaticPool.
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.product import Product, Variant, WickType
from models.users import AdminUser, AdminRole
from utils.hashing import get_password_hash
from utils.tokenJWT import create_access_token, SHARED_SUBJECT

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh schema for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Test client whose requests use the in-memory database."""
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    """Token issued for the shared operator password."""
    token = create_access_token({"sub": SHARED_SUBJECT, "role": AdminRole.OWNER.value, "name": "Admin"})
    return {"X-Admin-Token": token}


@pytest.fixture
def expired_headers():
    token = create_access_token({"sub": SHARED_SUBJECT}, expires_delta=timedelta(minutes=-5))
    return {"X-Admin-Token": token}


@pytest.fixture
def make_admin_user(db_session):
    """Factory for per-user admin accounts; returns (user, headers)."""
    def _make(role=AdminRole.STAFF, email="staff@example.com", password="Password123!", name="Staff Member"):
        user = AdminUser(
            email=email,
            password_hash=get_password_hash(password, rounds=4),
            name=name,
            role=getattr(role, "value", role),
            active=True,
        )
        db_session.add(user)
        db_session.commit()
        token = create_access_token({"sub": user.id, "role": user.role, "name": user.name})
        return user, {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture
def make_product(db_session):
    """Factory for a product with one variant; returns (product, variant)."""
    counter = {"n": 0}

    def _make(
        price_cents=1800,
        stock_on_hand=10,
        reorder_point=5,
        name=None,
        active=True,
        variant_active=True,
        **product_fields,
    ):
        counter["n"] += 1
        n = counter["n"]
        product = Product(
            name=name or f"Test Candle {n}",
            slug=product_fields.pop("slug", f"test-candle-{n}"),
            active=active,
            **product_fields,
        )
        db_session.add(product)
        db_session.flush()
        variant = Variant(
            product_id=product.id,
            vessel="Glass Jar",
            size_oz=8,
            wick_type=WickType.COTTON,
            price_cents=price_cents,
            sku=f"test-sku-{n}",
            active=variant_active,
            stock_on_hand=stock_on_hand,
            reorder_point=reorder_point,
        )
        db_session.add(variant)
        db_session.commit()
        return product, variant
    return _make


@pytest.fixture
def checkout_payload():
    """Builds a valid checkout body for the given cart lines."""
    def _build(items, email="shopper@example.com", **extra):
        body = {
            "email": email,
            "name": "Casey Shopper",
            "address1": "1 Candle Lane",
            "city": "Portland",
            "state": "OR",
            "postalCode": "97201",
            "items": items,
        }
        body.update(extra)
        return body
    return _build
