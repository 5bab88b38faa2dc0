import datetime
import os
import sys
import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

# Point the app at the test database before its settings are imported
TEST_SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
os.environ.setdefault("DATABASE_URL", TEST_SQLALCHEMY_DATABASE_URL)

# Add project root to sys.path to allow imports without installing
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from resellerhub.main import app
from resellerhub.db.base_class import Base
from resellerhub.db.session import get_db
from resellerhub.core.actor import Actor
from resellerhub.core.timeutils import add_months
from resellerhub.crud import crud_user, crud_package, crud_order
from resellerhub.models.user import User as UserModel, UserRole
from resellerhub.models.package import Package as PackageModel
from resellerhub.models.order import Order as OrderModel, PaymentMethod, PaymentStatus
from resellerhub.schemas.user import UserCreate
from resellerhub.schemas.package import PackageCreate
from resellerhub.schemas.order import OrderCreateInternal

engine = create_engine(
    TEST_SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base.metadata.create_all(bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

@pytest.fixture(scope="session")
def test_engine():
    Base.metadata.create_all(bind=engine)
    yield engine

@pytest.fixture(scope="function")
def db_session(test_engine):
    """
    Provides a database session for each test function.
    Tables are dropped and recreated first so every test starts empty.
    """
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture(scope="function")
def client():
    # The TestClient uses the app with the overridden get_db dependency
    with TestClient(app) as c:
        yield c


PASSWORD = "testpassword123"

def create_user(db: Session, role: UserRole, *, password: str = None, name: str = None) -> UserModel:
    suffix = uuid.uuid4().hex[:6]
    return crud_user.create_user(db=db, obj_in=UserCreate(
        email=f"{role.value}_{suffix}@example.com",
        name=name or f"{role.value.title()} {suffix}",
        phone="0900000000",
        role=role,
        password=password,
    ))

def create_package(db: Session, *, duration: int = 1, price: int = 1_000_000, is_active: bool = True) -> PackageModel:
    return crud_package.create_package(db=db, obj_in=PackageCreate(
        name=f"Package {uuid.uuid4().hex[:6]}",
        description="Monthly subscription",
        duration=duration,
        price=price,
        is_active=is_active,
    ))


def create_order_row(
    db: Session,
    *,
    customer: UserModel,
    package: PackageModel,
    reseller: UserModel = None,
    amount: int = None,
    status: PaymentStatus = PaymentStatus.PAID,
    order_date: datetime.datetime = None,
) -> OrderModel:
    """Write an order straight through CRUD with a chosen date and status (no commission)."""
    order_date = order_date or datetime.datetime(2024, 5, 10, 5, 0)
    return crud_order.create_order(db=db, obj_in=OrderCreateInternal(
        customer_id=customer.id,
        package_id=package.id,
        reseller_id=reseller.id if reseller else None,
        amount=package.price if amount is None else amount,
        payment_status=status,
        payment_method=PaymentMethod.CASH,
        order_date=order_date,
        activation_date=order_date,
        expiry_date=add_months(order_date, package.duration),
    ))

# Helper function to create a user and log them in
def _create_user_and_get_token(db: Session, client: TestClient, role: UserRole):
    user = create_user(db, role, password=PASSWORD)
    response = client.post("/api/v1/auth/login", data={"username": user.email, "password": PASSWORD})
    if response.status_code != 200:
        raise Exception(f"Failed to log in user {user.email} during fixture setup. Status: {response.status_code}, Detail: {response.text}")
    token = response.json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}
    return headers, user

@pytest.fixture(scope="function")
def admin_token_headers(db_session: Session, client: TestClient):
    return _create_user_and_get_token(db_session, client, UserRole.ADMIN)

@pytest.fixture(scope="function")
def reseller_token_headers(db_session: Session, client: TestClient):
    return _create_user_and_get_token(db_session, client, UserRole.RESELLER)

@pytest.fixture(scope="function")
def sub_agent_token_headers(db_session: Session, client: TestClient):
    return _create_user_and_get_token(db_session, client, UserRole.SUB_AGENT)

@pytest.fixture(scope="function")
def customer_token_headers(db_session: Session, client: TestClient):
    return _create_user_and_get_token(db_session, client, UserRole.CUSTOMER)

@pytest.fixture(scope="function")
def test_admin(db_session: Session) -> UserModel:
    return create_user(db_session, UserRole.ADMIN)

@pytest.fixture(scope="function")
def test_reseller(db_session: Session) -> UserModel:
    return create_user(db_session, UserRole.RESELLER)

@pytest.fixture(scope="function")
def test_sub_agent(db_session: Session) -> UserModel:
    return create_user(db_session, UserRole.SUB_AGENT)

@pytest.fixture(scope="function")
def test_customer(db_session: Session) -> UserModel:
    return create_user(db_session, UserRole.CUSTOMER)

@pytest.fixture(scope="function")
def test_package(db_session: Session) -> PackageModel:
    return create_package(db_session)

@pytest.fixture(scope="function")
def admin_actor(test_admin: UserModel) -> Actor:
    return Actor.from_user(test_admin)

@pytest.fixture(scope="function")
def reseller_actor(test_reseller: UserModel) -> Actor:
    return Actor.from_user(test_reseller)

@pytest.fixture(scope="function")
def sub_agent_actor(test_sub_agent: UserModel) -> Actor:
    return Actor.from_user(test_sub_agent)
