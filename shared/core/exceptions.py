from fastapi import status

from shared.utils.app_status_code import AppStatusCode


class HotelError(Exception):
    """Base class for domain failures. Carries the HTTP status and app code it maps to."""

    http_status = status.HTTP_400_BAD_REQUEST
    status_code = AppStatusCode.OPERATION_FAILED

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HotelError):
    status_code = AppStatusCode.INVALID_INPUT


class InvalidDateRange(ValidationError):
    status_code = AppStatusCode.INVALID_DATE_RANGE

    def __init__(self, message: str = "Check-out date must be after check-in date"):
        super().__init__(message)


class OccupancyExceeded(ValidationError):
    status_code = AppStatusCode.OCCUPANCY_EXCEEDED

    def __init__(self, max_occupancy: int):
        super().__init__(
            f"Room capacity exceeded. Maximum occupancy is {max_occupancy}")
        self.max_occupancy = max_occupancy


class NotFoundError(HotelError):
    http_status = status.HTTP_404_NOT_FOUND
    status_code = AppStatusCode.NOT_FOUND


class ConflictError(HotelError):
    http_status = status.HTTP_409_CONFLICT
    status_code = AppStatusCode.OPERATION_ERROR


class RoomUnavailable(ConflictError):
    status_code = AppStatusCode.ROOM_UNAVAILABLE

    def __init__(self, message: str = "Room is not available for the selected dates"):
        super().__init__(message)


class DuplicateKey(ConflictError):
    status_code = AppStatusCode.DUPLICATE_ADD_ERROR


class AuthorizationError(HotelError):
    http_status = status.HTTP_403_FORBIDDEN
    status_code = AppStatusCode.UNAUTHORIZED_ACTION


class InvalidTransitionError(HotelError):
    http_status = status.HTTP_409_CONFLICT
    status_code = AppStatusCode.INVALID_STATUS_TRANSITION

    def __init__(self, entity: str, current: str, target: str):
        super().__init__(
            f"Cannot move {entity} from '{current}' to '{target}'")
        self.current = current
        self.target = target
