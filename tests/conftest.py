"""Pytest configuration and fixtures."""

import os

# Keep the application engine in memory before rxengine.config is imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import itertools
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rxengine.main import app
from rxengine.database import Base, get_db
from rxengine.models.prescription import Prescription, PrescriptionItem
from rxengine.services.auth_service import create_access_token
from rxengine.services.config_service import ConfigService
from rxengine.utils.timezone import utcnow


# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Issue date used by the lifecycle scenarios (10:00 in Dhaka)
ISSUE_DATE = datetime(2026, 1, 1, 4, 0, 0)

_reference_counter = itertools.count(1)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    ConfigService.invalidate_cache()
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        ConfigService.invalidate_cache()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with overridden database dependency."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def customer():
    """Identity of a storefront customer."""
    return {
        "user_id": "customer-1",
        "user_email": "customer@example.com",
        "role": "customer"
    }


@pytest.fixture
def admin():
    """Identity of a pharmacist admin."""
    return {
        "user_id": "admin-1",
        "user_email": "pharmacist@example.com",
        "role": "admin"
    }


@pytest.fixture
def customer_headers(customer):
    """Authentication headers for a customer."""
    token = create_access_token(customer["user_id"], customer["user_email"], role="customer")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin):
    """Authentication headers for an admin."""
    token = create_access_token(admin["user_id"], admin["user_email"], role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_prescription(db):
    """Factory for stored prescriptions."""
    def _make(
        status="PENDING",
        prescription_date=ISSUE_DATE,
        expires_at=None,
        user_id="customer-1",
        items=None,
        created_at=None
    ):
        prescription = Prescription(
            reference_number=f"RX{next(_reference_counter):013d}TEST01",
            user_id=user_id,
            patient_name="Rahim Uddin",
            doctor_name="Dr. Nasrin Akter",
            hospital_clinic="Dhaka Medical College Hospital",
            prescription_date=prescription_date,
            prescription_image="/uploads/prescriptions/rx-test.jpg",
            status=status,
            expires_at=expires_at,
            created_at=created_at or utcnow(),
            items=[
                PrescriptionItem(product_id=product_id, name=name, quantity=quantity)
                for product_id, name, quantity in (items or [])
            ]
        )
        db.add(prescription)
        db.commit()
        db.refresh(prescription)
        return prescription

    return _make


@pytest.fixture
def sample_items():
    """Medicine lines as (product_id, name, quantity)."""
    return [
        ("prod-napa-500", "Napa 500mg", 2),
        ("prod-seclo-20", "Seclo 20mg", 1),
    ]


@pytest.fixture
def sample_upload():
    """Upload metadata as submitted by the storefront."""
    return {
        "patient_name": "Rahim Uddin",
        "doctor_name": "Dr. Nasrin Akter",
        "hospital_clinic": "Dhaka Medical College Hospital",
        "prescription_date": (utcnow() - timedelta(days=2)).isoformat(),
        "prescription_image": "/uploads/prescriptions/rx-1700000000000-1.jpg",
        "patient_age": 42,
        "patient_phone": "+880 1711-000000",
        "items": [
            {"product_id": "prod-napa-500", "name": "Napa 500mg", "quantity": 2},
            {"product_id": "prod-seclo-20", "name": "Seclo 20mg", "quantity": 1}
        ]
    }
