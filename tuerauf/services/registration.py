"""Registration: create a user for a new installation or update the one already known."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tuerauf.models.user import INSTALLATION_ID_MIN_LEN, PIN_LEN, USERNAME_MIN_LEN, User
from tuerauf.services.errors import (
    CapacityExhaustedError,
    DuplicateUsernameError,
    RegistrationConflictError,
    ValidationFailedError,
)

if TYPE_CHECKING:
    from tuerauf.core.notifier import LogAndMailNotifier
    from tuerauf.repositories import UserRepository
    from tuerauf.services.serial_id import SerialIdAllocator

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class ChangeSummary:
    """Previous values of fields changed by an update; None means unchanged."""

    previous_username: str | None = None
    previous_pin: str | None = None

    @property
    def username_changed(self) -> bool:
        return self.previous_username is not None

    @property
    def pin_changed(self) -> bool:
        return self.previous_pin is not None


@dataclass(frozen=True)
class Created:
    user: User
    changes: ChangeSummary
    status = "created"

    def unwrap(self) -> User:
        return self.user


@dataclass(frozen=True)
class Updated:
    user: User
    changes: ChangeSummary
    status = "updated"

    def unwrap(self) -> User:
        return self.user


@dataclass(frozen=True)
class Rejected:
    error: DuplicateUsernameError
    status = "rejected"

    def unwrap(self) -> User:
        raise self.error


RegistrationResult = Union[Created, Updated, Rejected]


def validate_registration(username: str, pin: str, installation_id: str) -> None:
    """Raise ValidationFailedError unless all fields meet their length constraints."""
    if username is None or len(username) < USERNAME_MIN_LEN:
        raise ValidationFailedError(f"username must be at least {USERNAME_MIN_LEN} characters")
    if pin is None or len(pin) != PIN_LEN:
        raise ValidationFailedError(f"pin must be exactly {PIN_LEN} characters")
    if installation_id is None or len(installation_id) < INSTALLATION_ID_MIN_LEN:
        raise ValidationFailedError(
            f"installationId must be at least {INSTALLATION_ID_MIN_LEN} characters"
        )


def _apply_update(user: User, username: str, pin: str) -> ChangeSummary:
    """Set username and pin on an existing user; remember what they were if they changed."""
    previous_username = user.username if user.username is not None and user.username != username else None
    previous_pin = user.pin if user.pin is not None and user.pin != pin else None
    user.username = username
    user.pin = pin
    return ChangeSummary(previous_username=previous_username, previous_pin=previous_pin)


class RegistrationService:
    """
    Decides whether a registration creates a user, updates the installation's
    existing user, or is rejected because the username is taken.

    The lookups, the serial id allocation and the write run in one transaction.
    If the store rejects the write with a uniqueness violation (another
    registration won the race), the transaction is rolled back and the decision
    is made again from fresh lookups.
    """

    def __init__(
        self,
        session: Session,
        user_repo: "UserRepository",
        allocator: "SerialIdAllocator",
        notifier: "LogAndMailNotifier",
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._session = session
        self._users = user_repo
        self._allocator = allocator
        self._notifier = notifier
        self._max_attempts = max_attempts

    def register_or_update(self, username: str, pin: str, installation_id: str) -> RegistrationResult:
        """
        Register a new installation or update the known one.

        Raises ValidationFailedError before touching the store, CapacityExhaustedError
        if no serial id is free, RegistrationConflictError if conflicts persist.
        A taken username is returned as Rejected, not raised.
        """
        validate_registration(username, pin, installation_id)

        for attempt in range(1, self._max_attempts + 1):
            try:
                result = self._register_once(username, pin, installation_id)
                if isinstance(result, Rejected):
                    self._session.rollback()
                else:
                    self._session.commit()
            except CapacityExhaustedError:
                self._session.rollback()
                raise
            except IntegrityError as e:
                self._session.rollback()
                logger.warning(
                    "Registration for installation %s hit a uniqueness conflict (attempt %s/%s): %s",
                    installation_id,
                    attempt,
                    self._max_attempts,
                    e.orig,
                )
                continue

            if isinstance(result, Rejected):
                logger.info("Registration rejected: %s", result.error.message)
                return result
            self._report(result)
            return result

        raise RegistrationConflictError(
            f"Registration for installation {installation_id} failed after "
            f"{self._max_attempts} attempts due to concurrent changes."
        )

    def _register_once(self, username: str, pin: str, installation_id: str) -> RegistrationResult:
        user = self._users.find_by_installation_id(installation_id)

        if user is None:
            if self._users.find_by_username(username) is not None:
                return Rejected(DuplicateUsernameError(username))
            user = User(
                installation_id=installation_id,
                username=username,
                pin=pin,
                serial_id=self._allocator.find_free_serial_id(),
                active=False,
                new_user=True,
            )
            self._users.save(user)
            return Created(user=user, changes=ChangeSummary())

        owner = self._users.find_by_username(username)
        if owner is not None and owner.id != user.id:
            return Rejected(DuplicateUsernameError(username))
        # Known device: bulk activation no longer applies to it.
        user.new_user = False
        changes = _apply_update(user, username, pin)
        self._users.save(user)
        return Updated(user=user, changes=changes)

    def _report(self, result: Created | Updated) -> None:
        user, changes = result.user, result.changes
        if changes.username_changed:
            self._notify(
                "user %s changed name to %s (serialId=%s)",
                changes.previous_username,
                user.username,
                user.serial_id,
            )
        if changes.pin_changed:
            self._notify("user %s changed pin (serialId=%s)", user.username, user.serial_id)
        self._notify("user %s %s (serialId=%s)", user.username, result.status, user.serial_id)

    def _notify(self, message: str, *args: object) -> None:
        try:
            self._notifier.notify(message, *args)
        except Exception:
            logger.exception("Notifier failed for message %r", message)
