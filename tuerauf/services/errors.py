"""Errors raised by the user services. HTTP and CLI layers map them to responses and exit codes."""


class UserServiceError(Exception):
    """Base class for user registration and pin table errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationFailedError(UserServiceError):
    """Registration input violates the length constraints; nothing was read or written."""


class DuplicateUsernameError(UserServiceError):
    """The username belongs to a different installation."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username {username} already exists.")


class CapacityExhaustedError(UserServiceError):
    """Every serial id is taken; the door controller's PIN table is full."""

    def __init__(self, max_serial_id: int) -> None:
        self.max_serial_id = max_serial_id
        super().__init__(f"too many users - MAX_SERIAL_ID ({max_serial_id}) reached")


class RecordNotFoundError(UserServiceError):
    """No user holds the given serial id."""

    def __init__(self, serial_id: int) -> None:
        self.serial_id = serial_id
        super().__init__(f"User with serialId {serial_id} does not exist")


class RegistrationConflictError(UserServiceError):
    """The store kept reporting uniqueness conflicts (concurrent registrations)."""
