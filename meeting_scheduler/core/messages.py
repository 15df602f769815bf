"""Message catalog, error codes and their HTTP status mapping."""

BAD_USER_INPUT = "BAD_USER_INPUT"
UNAUTHENTICATED = "UNAUTHENTICATED"
FORBIDDEN = "FORBIDDEN"
NOT_FOUND = "NOT_FOUND"
CONFLICT = "CONFLICT"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

HTTP_STATUS = {
    BAD_USER_INPUT: 400,
    UNAUTHENTICATED: 401,
    FORBIDDEN: 403,
    NOT_FOUND: 404,
    CONFLICT: 409,
    INTERNAL_SERVER_ERROR: 500,
}

# Generic
VALIDATION_FAILED = "Validation failed"
NOT_AUTHENTICATED = "Not authenticated"
FORBIDDEN_MESSAGE = "Forbidden"
RESOURCE_NOT_FOUND = "Resource not found"
DUPLICATE_KEY = "Duplicate key violation"
INTERNAL_ERROR = "An unexpected error occurred"
DATABASE_ERROR = "Database operation failed"

# Auth
INVALID_CREDENTIALS = "Invalid credentials"
EMAIL_IN_USE = "Email already in use"
JWT_MISSING = "Server misconfiguration: JWT secret missing"

# Domain
USER_NOT_FOUND = "User not found"
MEETING_NOT_FOUND = "Meeting not found"
EVENT_NOT_FOUND = "Event not found"
BOOKING_NOT_FOUND = "Booking not found"
EVENT_ALREADY_BOOKED = "Event already booked"
ATTENDEE_NOT_FOUND = "Attendee not found"
ADMIN_REQUIRED = "Admin role required"

# Validation
NAME_REQUIRED = "Name is required"
NAME_MIN = "Name must be at least 2 characters"
NAME_MAX = "Name must be less than 50 characters"
NAME_PATTERN = "Name can only contain letters, spaces, hyphens, and apostrophes"
EMAIL_INVALID = "Invalid email format"
TOO_LONG = "{field} must be at most {max} characters"
PASSWORD_MIN = "Password must be at least 8 characters"
PASSWORD_COMPLEXITY = (
    "Password must contain at least one lowercase letter, one uppercase letter, "
    "one number, and one special character"
)
PASSWORD_TOO_LONG = "Password must be at most 72 bytes when encoded in UTF-8"
TITLE_REQUIRED = "Title is required"
TITLE_MAX = "Title must be at most {max} characters"
INVALID_START_TIME = "Invalid startTime"
INVALID_END_TIME = "Invalid endTime"
INVALID_DATE = "Invalid date format"
INVALID_DOB = "Invalid dob"
INVALID_ATTENDEE_ID = "Invalid attendee id"
INVALID_ID = "Invalid id"
START_BEFORE_END = "startTime must be before endTime"
MEETING_DURATION = "Meeting duration must be between {min} minutes and {max_hours} hours"
PRICE_NON_NEGATIVE = "Price must be non-negative"
INVALID_URL = "Please enter a valid URL"
INVALID_IMAGE = "Must be a valid URL or JSON string"
INVALID_DATE_RANGE = "startDate must not be after endDate"
