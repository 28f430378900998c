"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from types import SimpleNamespace
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fintrack_core.api.main import create_app
from fintrack_core.infrastructure.database.models import (
    AccountRecord,
    Base,
    CategoryRecord,
    TagRecord,
    TenantRecord,
)
from fintrack_core.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_ID = "user-1"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def seed(db: Session) -> SimpleNamespace:
    """Two tenants with accounts, categories and tags"""
    home = TenantRecord(id="tenant-home", name="Home")
    other = TenantRecord(id="tenant-other", name="Other")
    audit = {"created_by": USER_ID, "updated_by": USER_ID}

    records = [
        home,
        other,
        AccountRecord(id="acc-bank", tenant_id=home.id, name="Checking", currency="USD", type="bank", **audit),
        AccountRecord(id="acc-savings", tenant_id=home.id, name="Savings", currency="USD", type="bank", **audit),
        AccountRecord(id="acc-card", tenant_id=home.id, name="Visa", currency="BRL", type="credit_card", **audit),
        AccountRecord(id="acc-foreign", tenant_id=other.id, name="Theirs", currency="EUR", type="bank", **audit),
        CategoryRecord(id="cat-food", tenant_id=home.id, name="Food", type="expense", **audit),
        CategoryRecord(id="cat-foreign", tenant_id=other.id, name="Theirs", type="expense", **audit),
        TagRecord(id="tag-groceries", tenant_id=home.id, name="groceries", **audit),
        TagRecord(id="tag-monthly", tenant_id=home.id, name="monthly", **audit),
        TagRecord(id="tag-foreign", tenant_id=other.id, name="theirs", **audit),
    ]
    db.add_all(records)
    db.commit()

    return SimpleNamespace(
        tenant_id=home.id,
        other_tenant_id=other.id,
        user_id=USER_ID,
        headers={"X-Tenant-ID": home.id, "X-User-ID": USER_ID},
    )
