"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, time, timedelta
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.rbac import UserRole
from app.core.security import create_access_token, get_password_hash
from app.db.base import Base
from app.db.session import get_db
from app.main import app
# Import all models to ensure they're registered with Base.metadata
from app.models import *
from app.models.restaurant import Restaurant, Table, TableStatus
from app.models.reservations import Reservation, ReservationStatus
from app.models.staff import Staff
from app.models.user import User
from app.services.conversation_state import ConversationStateStore

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

PASSWORD = "testpass123"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    # Fresh chat state for every test
    app.state.conversation_store = ConversationStateStore()
    # Disable rate limiters during tests to avoid flaky failures
    from app.core.rate_limit import limiter
    limiter.enabled = False
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    limiter.enabled = True
    app.dependency_overrides.clear()


def _make_user(db: Session, email: str, role: UserRole, name: str) -> User:
    user = User(
        email=email,
        password_hash=get_password_hash(PASSWORD),
        role=role,
        name=name,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def token_for(user: User) -> dict:
    """Authorization headers for ``user``."""
    token = create_access_token(
        data={"sub": user.id, "email": user.email, "role": user.role.value}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db_session: Session) -> User:
    return _make_user(db_session, "admin@mesafeliz.com", UserRole.ADMIN, "Admin")


@pytest.fixture
def owner_user(db_session: Session) -> User:
    return _make_user(db_session, "owner@latradicion.mx", UserRole.RESTAURANT_ADMIN, "Dueño")


@pytest.fixture
def customer_user(db_session: Session) -> User:
    return _make_user(db_session, "cliente@example.com", UserRole.CUSTOMER, "Ana López")


@pytest.fixture
def other_customer(db_session: Session) -> User:
    return _make_user(db_session, "otro@example.com", UserRole.CUSTOMER, "Luis Pérez")


@pytest.fixture
def restaurant(db_session: Session, owner_user: User) -> Restaurant:
    """An active restaurant open 13:00-23:00, owned by ``owner_user``."""
    restaurant = Restaurant(
        owner_id=owner_user.id,
        name="La Tradición Yucateca",
        description="Cocina yucateca tradicional",
        address="Calle 60 #415, Centro, Mérida",
        cuisine_type="Yucateca",
        zone="Centro",
        price_range="$$",
        open_time=time(13, 0),
        close_time=time(23, 0),
        is_active=True,
        rating=0,
        review_count=0,
    )
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


@pytest.fixture
def other_restaurant(db_session: Session) -> Restaurant:
    restaurant = Restaurant(name="Marisquería El Puerto", zone="Norte", is_active=True)
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


@pytest.fixture
def staff_user(db_session: Session, restaurant: Restaurant) -> User:
    user = _make_user(db_session, "mesero@latradicion.mx", UserRole.STAFF, "Carlos")
    db_session.add(Staff(user_id=user.id, restaurant_id=restaurant.id, position="waiter"))
    db_session.commit()
    return user


@pytest.fixture
def other_staff_user(db_session: Session, other_restaurant: Restaurant) -> User:
    user = _make_user(db_session, "mesero@elpuerto.mx", UserRole.STAFF, "Jorge")
    db_session.add(Staff(user_id=user.id, restaurant_id=other_restaurant.id, position="host"))
    db_session.commit()
    return user


@pytest.fixture
def table(db_session: Session, restaurant: Restaurant) -> Table:
    """Table 1 (4 seats) with the fixed id ``abc``."""
    table = Table(
        id="abc",
        restaurant_id=restaurant.id,
        number=1,
        capacity=4,
        status=TableStatus.AVAILABLE,
    )
    db_session.add(table)
    db_session.commit()
    db_session.refresh(table)
    return table


@pytest.fixture
def future_date() -> date:
    return date.today() + timedelta(days=7)


@pytest.fixture
def make_reservation(db_session: Session, restaurant: Restaurant, customer_user: User, future_date: date):
    """Factory inserting a reservation row directly."""
    def _make(status=ReservationStatus.PENDING, table_id=None, user_id=None, **kwargs):
        reservation = Reservation(
            restaurant_id=kwargs.pop("restaurant_id", restaurant.id),
            table_id=table_id,
            user_id=user_id or customer_user.id,
            customer_name=kwargs.pop("customer_name", "Ana López"),
            email=kwargs.pop("email", "cliente@example.com"),
            date=kwargs.pop("date", future_date),
            time=kwargs.pop("time", time(20, 0)),
            guest_count=kwargs.pop("guest_count", 2),
            status=status,
            **kwargs,
        )
        db_session.add(reservation)
        db_session.commit()
        db_session.refresh(reservation)
        return reservation

    return _make
