"""User registration, serial id allocation and pin table services."""

from tuerauf.services.errors import (
    CapacityExhaustedError,
    DuplicateUsernameError,
    RecordNotFoundError,
    RegistrationConflictError,
    UserServiceError,
    ValidationFailedError,
)
from tuerauf.services.registration import (
    ChangeSummary,
    Created,
    RegistrationResult,
    RegistrationService,
    Rejected,
    Updated,
)
from tuerauf.services.serial_id import MAX_SERIAL_ID, SerialIdAllocator
from tuerauf.services.users import UserService

__all__ = [
    "CapacityExhaustedError",
    "ChangeSummary",
    "Created",
    "DuplicateUsernameError",
    "MAX_SERIAL_ID",
    "RecordNotFoundError",
    "RegistrationConflictError",
    "RegistrationResult",
    "RegistrationService",
    "Rejected",
    "SerialIdAllocator",
    "Updated",
    "UserService",
    "UserServiceError",
    "ValidationFailedError",
]
