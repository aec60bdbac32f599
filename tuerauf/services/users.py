"""Access checks, pin hand-off to the door controller, and bulk activation."""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from tuerauf.models.user import User
from tuerauf.services.errors import RecordNotFoundError
from tuerauf.services.serial_id import MAX_SERIAL_ID

if TYPE_CHECKING:
    from tuerauf.repositories import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, session: Session, user_repo: "UserRepository", max_serial_id: int = MAX_SERIAL_ID):
        self._session = session
        self._users = user_repo
        self._max_serial_id = max_serial_id

    def get_active_user(self, installation_id: str) -> User | None:
        """Return the installation's user if it exists and is active, else None."""
        user = self._users.find_by_installation_id(installation_id)
        if user is None or not user.active:
            return None
        return user

    def list_active_pins(self) -> list[str | None]:
        """
        Pins of active users indexed by serial id (length MAX_SERIAL_ID).

        Pins are cleared after they were sent to the door controller, so only
        pins not yet delivered show up here.
        """
        pins: list[str | None] = [None] * self._max_serial_id
        for user in self._users.find_by_active(True):
            if user.pin is None:
                continue
            if not 0 <= user.serial_id < self._max_serial_id:
                logger.warning("User %s has serialId %s outside the pin table", user.username, user.serial_id)
                continue
            pins[user.serial_id] = user.pin
        return pins

    def clear_pins(self, serial_ids: Iterable[int]) -> int:
        """
        Clear the stored pin of the user in each given slot.

        All slots are resolved before anything changes: if one has no user,
        RecordNotFoundError is raised and no pin is cleared. Returns the number
        of users whose pin was cleared.
        """
        users: list[User] = []
        for serial_id in dict.fromkeys(serial_ids):
            user = self._users.find_by_serial_id(serial_id)
            if user is None:
                raise RecordNotFoundError(serial_id)
            users.append(user)

        for user in users:
            user.pin = None
            self._users.save(user)
        self._session.commit()
        logger.info("Cleared pins for serialIds %s", [u.serial_id for u in users])
        return len(users)

    def activate(self, users: Iterable[User]) -> list[User]:
        """Activate the given users that are not active yet. Returns the ones that changed."""
        activated = [u for u in users if not u.active]
        for user in activated:
            user.active = True
            self._users.save(user)
        self._session.commit()
        if activated:
            logger.info("Activated users: %s", ", ".join(u.username for u in activated))
        return activated

    def activate_all_pending_new(self) -> list[User]:
        """Activate every inactive user that is still new. Returns the activated users."""
        return self.activate(self._users.find_pending_new())

    def count_users(self) -> int:
        return self._users.count()
