import os

# Set environment for testing before the application is imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from clinic_scheduler.main import app
from clinic_scheduler.core.database import get_db, Base
from clinic_scheduler.core.security import UserRole, create_user_token
from clinic_scheduler.models import Patient, Specialization, User
from clinic_scheduler.services.doctor_service import DoctorService

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db(test_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

@pytest.fixture
def make_patient(db):
    def _make_patient(email="patient@example.com", name="Test Patient"):
        user = User(email=email, name=name, role=UserRole.PATIENT, is_active=True)
        user.patient = Patient()
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_patient

@pytest.fixture
def make_doctor(db):
    def _make_doctor(
        email="doctor@example.com",
        name="Dr. Test",
        specialization=Specialization.PHYSICIAN,
        approved=True
    ):
        return DoctorService(db).create_doctor(
            email=email,
            name=name,
            specialization=specialization,
            is_approved=approved
        )
    return _make_doctor

@pytest.fixture
def make_admin(db):
    def _make_admin(email="admin@example.com"):
        user = User(email=email, name="Admin", role=UserRole.ADMIN, is_active=True)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_admin

@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_user_token(user.id, user.email, user.role)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
