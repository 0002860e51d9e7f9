from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    RECEPTIONIST = "receptionist"
    HOUSEKEEPING = "housekeeping"
    GUEST = "guest"


# Everyone who works at the hotel
STAFF_ROLES = {
    UserRole.ADMIN.value,
    UserRole.MANAGER.value,
    UserRole.RECEPTIONIST.value,
    UserRole.HOUSEKEEPING.value,
}

# Roles notified about bookings and guests' requests
ELEVATED_ROLES = {
    UserRole.ADMIN.value,
    UserRole.MANAGER.value,
    UserRole.RECEPTIONIST.value,
}

# Roles allowed to assign work and set prices
MANAGEMENT_ROLES = {
    UserRole.ADMIN.value,
    UserRole.MANAGER.value,
}
