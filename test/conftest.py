"""
Test Configuration and Fixtures

- Environment variables are set before any application import, since
  settings are read at import time
- Every test gets a fresh in-memory SQLite database shared by the API
  client and the test itself
- Users of each role, a bus with its seat map and a route are available as
  fixtures
"""

import os

os.environ.setdefault('SECRET_KEY', 'test-secret-key-for-bus-booking')
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ.setdefault('LOG_LEVEL', 'WARNING')

from datetime import date, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import src.models  # noqa: E402, F401
from src.auth.utils import create_access_token, get_password_hash  # noqa: E402
from src.bookings.booking_service import BookingService  # noqa: E402
from src.bookings.schemas import BookingCreate  # noqa: E402
from src.buses.schemas import BusCreate  # noqa: E402
from src.buses.service import BusService  # noqa: E402
from src.database import Base, get_db  # noqa: E402
from src.main import app  # noqa: E402
from src.models import User  # noqa: E402
from src.routes.schemas import RouteCreate  # noqa: E402
from src.routes.service import RouteService  # noqa: E402

DEFAULT_PASSWORD = 'P@ssw0rd'
API = '/api/v1'

engine = create_engine(
    'sqlite://',
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_user(db, email, role='user', status='approved', name='Test User', **extra):
    user = User(
        name=name,
        email=email,
        phone='9876543210',
        password=get_password_hash(DEFAULT_PASSWORD),
        role=role,
        status=status,
        **extra,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token({'sub': str(user.id), 'role': user.role})
    return {'Authorization': f'Bearer {token}'}


def make_bus(db, owner_id=None, seat_type='Seater', bus_number='KA01AB1234', **extra):
    bus_data = {
        'name': 'Night Rider',
        'bus_number': bus_number,
        'bus_type': 'AC',
        'seat_type': seat_type,
        'operator': 'Sunrise Travels',
        'amenities': ['WiFi', 'Blanket'],
    }
    bus_data.update(extra)
    return BusService.create_bus(db, BusCreate(**bus_data), owner_id=owner_id)


def make_route(db, bus_id, **extra):
    route_data = {
        'bus_id': bus_id,
        'source': 'Bangalore',
        'destination': 'Chennai',
        'departure_time': '21:30',
        'arrival_time': '05:30',
        'duration': '8h',
        'distance': 346,
        'price': Decimal('800.00'),
        'boarding_points': ['Majestic', 'Silk Board'],
        'dropping_points': ['Koyambedu'],
    }
    route_data.update(extra)
    return RouteService.create_route(db, RouteCreate(**route_data))


def seat_payload(seat_number, gender='Male', preference=False, name='Passenger', age=30):
    return {
        'seat_number': seat_number,
        'passenger_name': name,
        'passenger_age': age,
        'passenger_gender': gender,
        'gender_preference': preference,
    }


def make_booking(db, user_id, bus, route, journey_date, seats=('1',), booking_status=None):
    booking = BookingService(db).create_booking(user_id, BookingCreate(
        bus_id=bus.id,
        route_id=route.id,
        journey_date=journey_date,
        seats=[seat_payload(number, name=f'Passenger {number}') for number in seats],
        boarding_point='Majestic',
        dropping_point='Koyambedu',
    ))
    if booking_status:
        booking.booking_status = booking_status
        db.commit()
        db.refresh(booking)
    return booking


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def traveller(db_session):
    return make_user(db_session, 'traveller@example.com', name='Asha Traveller')


@pytest.fixture
def traveller_headers(traveller):
    return auth_headers(traveller)


@pytest.fixture
def another_traveller(db_session):
    return make_user(db_session, 'another@example.com', name='Ravi Traveller')


@pytest.fixture
def another_traveller_headers(another_traveller):
    return auth_headers(another_traveller)


@pytest.fixture
def bus_owner(db_session):
    return make_user(
        db_session,
        'owner@example.com',
        role='bus_owner',
        name='Bus Owner',
        company_name='Sunrise Travels',
    )


@pytest.fixture
def bus_owner_headers(bus_owner):
    return auth_headers(bus_owner)


@pytest.fixture
def admin(db_session):
    return make_user(db_session, 'admin@example.com', role='admin', name='Admin')


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def bus(db_session, bus_owner):
    return make_bus(db_session, owner_id=bus_owner.id)


@pytest.fixture
def route(db_session, bus):
    return make_route(db_session, bus.id)


@pytest.fixture
def journey_date():
    return date.today() + timedelta(days=7)
