from enum import Enum


class RoomType(str, Enum):

    single = "Single"
    double = "Double"
    suite = "Suite"
    deluxe = "Deluxe"
    presidential = "Presidential"


class RoomStatus(str, Enum):

    available = "available"
    occupied = "occupied"
    cleaning = "cleaning"
    maintenance = "maintenance"
    reserved = "reserved"


class ReservationStatus(str, Enum):

    pending = "pending"
    confirmed = "confirmed"
    checked_in = "checked-in"
    checked_out = "checked-out"
    cancelled = "cancelled"


# Reservations that hold a room for their dates
BLOCKING_STATUSES = (
    ReservationStatus.confirmed.value,
    ReservationStatus.checked_in.value,
)


class BookingSource(str, Enum):

    online = "online"
    phone = "phone"
    walk_in = "walk-in"
    agent = "agent"


class PaymentStatus(str, Enum):

    pending = "pending"
    partial = "partial"
    paid = "paid"
    refunded = "refunded"


class PaymentMethod(str, Enum):

    cash = "cash"
    card = "card"
    upi = "upi"
    bank_transfer = "bank-transfer"
    other = "other"


class ServiceLineType(str, Enum):

    food = "food"
    laundry = "laundry"
    transportation = "transportation"
    spa = "spa"
    other = "other"


class ServiceRequestType(str, Enum):

    room_service = "room-service"
    wake_up_call = "wake-up-call"
    transportation = "transportation"
    laundry = "laundry"
    spa = "spa"
    concierge = "concierge"
    other = "other"


class ServiceRequestStatus(str, Enum):

    pending = "pending"
    confirmed = "confirmed"
    in_progress = "in-progress"
    completed = "completed"
    cancelled = "cancelled"


class Priority(str, Enum):

    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class FeedbackCategory(str, Enum):

    room = "room"
    service = "service"
    food = "food"
    cleanliness = "cleanliness"
    staff = "staff"
    overall = "overall"


class FeedbackStatus(str, Enum):

    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class NotificationType(str, Enum):

    booking = "booking"
    check_in = "check-in"
    check_out = "check-out"
    service_request = "service-request"
    payment = "payment"
    maintenance = "maintenance"
    message = "message"
    system = "system"
