import random
from datetime import date, timedelta

from faker import Faker
from sqlalchemy.orm import Session

from shared.core.database import AuthBase, AuthSessionLocal, Base, HotelSessionLocal, auth_engine, hotel_engine
from shared.models.users import Users
from shared.utils.enums import UserRole
from .app.crud.financials.bills_crud import generate_bill_for_reservation
from .app.crud.hospitality.reservations_crud import calculate_total_amount, generate_confirmation_number
from .app.crud.hospitality.rooms_crud import calculate_nights
from .app.crud.system.system_settings_crud import get_or_create_settings
from .app.enum.hotel_enum import BookingSource, ReservationStatus, RoomStatus, RoomType
from .app.models.financials import bills
from .app.models.hospitality.reservations import Reservation
from .app.models.hospitality.rooms import Room
from .app.models.hospitality import feedback, service_requests
from .app.models.messaging import conversations
from .app.models.system import notifications, system_settings

# Create tables
AuthBase.metadata.create_all(bind=auth_engine)
Base.metadata.create_all(bind=hotel_engine)

fake = Faker()

DEFAULT_PASSWORD = "Password@123"

# room type -> (price per night, max occupancy, amenities)
ROOM_CATALOG = {
    RoomType.single.value: (99, 1, ["WiFi", "TV"]),
    RoomType.double.value: (149, 2, ["WiFi", "TV", "Mini Bar"]),
    RoomType.suite.value: (299, 4, ["WiFi", "TV", "Mini Bar", "Jacuzzi"]),
    RoomType.deluxe.value: (399, 3, ["WiFi", "TV", "Mini Bar", "Balcony"]),
    RoomType.presidential.value: (999, 6, ["WiFi", "TV", "Mini Bar", "Jacuzzi", "Butler"]),
}

STAFF = [
    ("admin@luxuryhotel.com", "Hotel", "Admin", UserRole.ADMIN.value),
    ("manager@luxuryhotel.com", "Front", "Manager", UserRole.MANAGER.value),
    ("reception@luxuryhotel.com", "Front", "Desk", UserRole.RECEPTIONIST.value),
    ("housekeeping@luxuryhotel.com", "House", "Keeping", UserRole.HOUSEKEEPING.value),
]


def _get_or_create_user(auth_db: Session, email: str, first_name: str, last_name: str, role: str) -> Users:
    user = auth_db.query(Users).filter(Users.email == email).first()
    if user:
        return user
    user = Users(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=fake.msisdn()[:15],
        role=role,
        is_active=True,
    )
    user.set_password(DEFAULT_PASSWORD)
    auth_db.add(user)
    auth_db.flush()
    return user


def seed_users(auth_db: Session, guest_count: int = 10):
    for email, first_name, last_name, role in STAFF:
        _get_or_create_user(auth_db, email, first_name, last_name, role)

    guests = []
    for index in range(1, guest_count + 1):
        guests.append(_get_or_create_user(
            auth_db, f"guest{index}@example.com",
            fake.first_name(), fake.last_name(), UserRole.GUEST.value))
    auth_db.commit()
    return guests


def seed_rooms(db: Session, floors: int = 5, rooms_per_floor: int = 8):
    room_types = list(ROOM_CATALOG)
    for floor in range(1, floors + 1):
        for index in range(1, rooms_per_floor + 1):
            room_number = f"{floor}{index:02d}"
            if db.query(Room.id).filter(Room.room_number == room_number).first():
                continue

            # Higher floors get the bigger rooms
            room_type = room_types[min(len(room_types) - 1, (floor - 1 + index // 4) // 2)]
            price, occupancy, amenities = ROOM_CATALOG[room_type]
            db.add(Room(
                room_number=room_number,
                room_type=room_type,
                floor=floor,
                price_per_night=price,
                max_occupancy=occupancy,
                status=RoomStatus.available.value,
                description=fake.sentence(nb_words=12),
                amenities=amenities,
                images=[],
            ))
    db.commit()


def seed_reservations(db: Session, guests, count: int = 8):
    if db.query(Reservation.id).first():
        return

    rooms = db.query(Room).filter(Room.status == RoomStatus.available.value).all()
    for room, guest in zip(random.sample(rooms, k=min(count, len(rooms))), guests):
        check_in = date.today() + timedelta(days=random.randint(1, 30))
        check_out = check_in + timedelta(days=random.randint(1, 5))
        reservation = Reservation(
            confirmation_number=generate_confirmation_number(db),
            guest_id=guest.id,
            room_id=room.id,
            check_in=check_in,
            check_out=check_out,
            number_of_guests=random.randint(1, room.max_occupancy),
            status=ReservationStatus.confirmed.value,
            total_amount=calculate_total_amount(
                room.price_per_night, calculate_nights(check_in, check_out)),
            booking_source=random.choice(list(BookingSource)).value,
            special_requests=random.choice([None, "Late check-in", "Extra pillows", "High floor"]),
            created_by=guest.id,
        )
        room.status = RoomStatus.reserved.value
        room.booking_version += 1
        db.add(reservation)
        db.commit()
        generate_bill_for_reservation(db, reservation)


def seed_data():
    auth_db: Session = AuthSessionLocal()
    db: Session = HotelSessionLocal()
    try:
        get_or_create_settings(db)
        guests = seed_users(auth_db)
        seed_rooms(db)
        seed_reservations(db, guests)
        print("Database seeded with staff, guests, rooms and reservations.")
        print(f"All seeded users share the password {DEFAULT_PASSWORD}")
    except Exception as e:
        db.rollback()
        auth_db.rollback()
        print("Error seeding data:", e)
        raise
    finally:
        db.close()
        auth_db.close()


if __name__ == "__main__":
    seed_data()
