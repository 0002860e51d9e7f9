import os
import tempfile
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

# Settings are read at import time, so the test databases are chosen first
_DB_DIR = tempfile.mkdtemp(prefix="hotel-tests-")
os.environ["AUTH_DATABASE_URL"] = "sqlite:///" + os.path.join(_DB_DIR, "auth.db")
os.environ["HOTEL_DATABASE_URL"] = "sqlite:///" + os.path.join(_DB_DIR, "hotel.db")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SMTP_HOST"] = ""

import pytest
from fastapi.testclient import TestClient

from shared.core.auth import create_access_token
from shared.core.database import AuthBase, AuthSessionLocal, Base, HotelSessionLocal, auth_engine, hotel_engine
from shared.models.users import Users, bcrypt_context
from hotel_service.app.main import app as hotel_app
from hotel_service.app.enum.hotel_enum import ReservationStatus, RoomStatus
from hotel_service.app.models.hospitality.reservations import Reservation
from hotel_service.app.models.hospitality.rooms import Room
from auth_service.app.main import app as auth_app

DEFAULT_PASSWORD = "secret123"
_password_hash = None


def _hashed_default_password() -> str:
    global _password_hash
    if _password_hash is None:
        _password_hash = bcrypt_context.hash(DEFAULT_PASSWORD)
    return _password_hash


@dataclass
class Actor:
    id: uuid.UUID
    email: str
    role: str
    token: str

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(autouse=True)
def tables():
    AuthBase.metadata.create_all(bind=auth_engine)
    Base.metadata.create_all(bind=hotel_engine)
    yield
    Base.metadata.drop_all(bind=hotel_engine)
    AuthBase.metadata.drop_all(bind=auth_engine)


@pytest.fixture
def db():
    session = HotelSessionLocal()
    yield session
    session.close()


@pytest.fixture
def auth_db():
    session = AuthSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    with TestClient(hotel_app) as test_client:
        yield test_client


@pytest.fixture
def auth_client():
    with TestClient(auth_app) as test_client:
        yield test_client


@pytest.fixture
def make_user(auth_db):
    def _make_user(role: str = "guest", email: str = None, is_active: bool = True,
                   first_name: str = "Test", last_name: str = None) -> Actor:
        user = Users(
            first_name=first_name,
            last_name=last_name or role.capitalize(),
            email=email or f"{role}-{uuid.uuid4().hex[:8]}@example.com",
            password=_hashed_default_password(),
            role=role,
            is_active=is_active,
        )
        auth_db.add(user)
        auth_db.commit()
        auth_db.refresh(user)
        return Actor(id=user.id, email=user.email, role=user.role,
                     token=create_access_token(user))
    return _make_user


@pytest.fixture
def guest(make_user):
    return make_user("guest")


@pytest.fixture
def other_guest(make_user):
    return make_user("guest")


@pytest.fixture
def receptionist(make_user):
    return make_user("receptionist")


@pytest.fixture
def housekeeping(make_user):
    return make_user("housekeeping")


@pytest.fixture
def manager(make_user):
    return make_user("manager")


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def make_room(db):
    def _make_room(room_number: str = "101", price: float = 150, max_occupancy: int = 2,
                   room_type: str = "Double", floor: int = 1,
                   status: str = RoomStatus.available.value) -> Room:
        room = Room(
            room_number=room_number,
            room_type=room_type,
            floor=floor,
            price_per_night=Decimal(str(price)),
            max_occupancy=max_occupancy,
            status=status,
            amenities=[],
            images=[],
        )
        db.add(room)
        db.commit()
        db.refresh(room)
        return room
    return _make_room


@pytest.fixture
def make_reservation(db):
    """Stores a reservation directly, bypassing the booking checks."""
    def _make_reservation(room: Room, guest_id, check_in: date, check_out: date,
                          status: str = ReservationStatus.confirmed.value) -> Reservation:
        reservation = Reservation(
            confirmation_number=f"LUX{uuid.uuid4().hex[:12].upper()}",
            guest_id=guest_id,
            room_id=room.id,
            check_in=check_in,
            check_out=check_out,
            number_of_guests=1,
            status=status,
            total_amount=Decimal("100"),
            booking_source="online",
        )
        db.add(reservation)
        db.commit()
        db.refresh(reservation)
        return reservation
    return _make_reservation


def booking_payload(room, check_in: str, check_out: str, guests: int = 1, **extra) -> dict:
    return {
        "room_id": str(room.id),
        "check_in": check_in,
        "check_out": check_out,
        "number_of_guests": guests,
        **extra,
    }
