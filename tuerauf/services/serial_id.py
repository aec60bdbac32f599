"""Serial id allocation: the lowest free slot of the door controller's PIN table."""

import logging
from typing import TYPE_CHECKING

from tuerauf.services.errors import CapacityExhaustedError

if TYPE_CHECKING:
    from tuerauf.core.notifier import LogAndMailNotifier
    from tuerauf.repositories import UserRepository

logger = logging.getLogger(__name__)

# Default size of the PIN table; overridden by settings.MAX_SERIAL_ID.
MAX_SERIAL_ID = 16


def lowest_free_slot(occupied: "list[int] | set[int]", max_serial_id: int) -> int | None:
    """
    Return the smallest slot in [0, max_serial_id) that is not occupied, or None if all are.

    Out-of-range values in occupied are ignored.
    """
    used = [False] * max_serial_id
    for serial_id in occupied:
        if 0 <= serial_id < max_serial_id:
            used[serial_id] = True
    for serial_id, is_used in enumerate(used):
        if not is_used:
            return serial_id
    return None


class SerialIdAllocator:
    """
    Finds the lowest unused serial id.

    Lowest-first keeps the PIN table densely packed and reuses slots freed by
    deleted users. Nothing is reserved: the caller must insert a user with the
    returned id in the same transaction (the unique constraint on serial_id
    catches concurrent allocations).
    """

    def __init__(
        self,
        users: "UserRepository",
        notifier: "LogAndMailNotifier",
        max_serial_id: int = MAX_SERIAL_ID,
    ) -> None:
        self._users = users
        self._notifier = notifier
        self.max_serial_id = max_serial_id

    def find_free_serial_id(self) -> int:
        """
        Return the lowest free serial id.

        Raises CapacityExhaustedError (after notifying the admin) if all ids are in use.
        """
        serial_id = lowest_free_slot(self._users.occupied_serial_ids(), self.max_serial_id)
        if serial_id is not None:
            logger.debug("find_free_serial_id returns serialId %s", serial_id)
            return serial_id

        error = CapacityExhaustedError(self.max_serial_id)
        try:
            self._notifier.notify("too many users - MAX_SERIAL_ID reached")
        except Exception:
            logger.exception("Notifier failed while reporting exhausted serial ids")
        raise error
