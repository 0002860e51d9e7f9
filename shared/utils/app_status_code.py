class AppStatusCode:
    # Success
    DATA_RETRIEVED_SUCCESSFULLY = "1000"
    CREATED_SUCCESSFULLY = "1001"
    UPDATED_SUCCESSFULLY = "1002"
    DELETED_SUCCESSFULLY = "1003"

    # Generic failures
    OPERATION_FAILED = "2000"
    OPERATION_ERROR = "2001"
    INVALID_INPUT = "2002"
    REQUIRED_VALIDATION_ERROR = "2003"
    INVALID_DATE_RANGE = "2004"
    NOT_FOUND = "2005"
    DUPLICATE_ADD_ERROR = "2006"
    UNAUTHORIZED_ACTION = "2007"
    INVALID_STATUS_TRANSITION = "2008"

    # Booking
    ROOM_UNAVAILABLE = "3000"
    OCCUPANCY_EXCEEDED = "3001"

    # Authentication
    AUTHENTICATION_TOKEN_INVALID = "4000"
    AUTHENTICATION_TOKEN_EXPIRED = "4001"
    AUTHENTICATION_USER_INVALID = "4002"
    AUTHENTICATION_USER_INACTIVE = "4003"
    AUTHENTICATION_CREDENTIALS_INVALID = "4004"
    AUTHENTICATION_UNAUTHORIZED_ACCESS = "4005"
    USER_EMAIL_IS_UNIQUE = "4006"
