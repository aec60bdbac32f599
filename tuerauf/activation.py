"""
CLI entrypoint for activating newly registered users. Run by the admin or from cron, e.g.:

  python -m tuerauf.activation

Or nightly: 0 3 * * * cd /path/to/tuerauf && .venv/bin/python -m tuerauf.activation
"""

import logging
import sys

from tuerauf.core.config import get_settings
from tuerauf.core.database import SessionLocal
from tuerauf.repositories import UserRepository
from tuerauf.services.users import UserService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Activate all users that are new and not active yet."""
    settings = get_settings()
    db = SessionLocal()
    try:
        service = UserService(db, UserRepository(db), max_serial_id=settings.MAX_SERIAL_ID)
        activated = service.activate_all_pending_new()
        for user in activated:
            logger.info("Activated %s (serialId=%s)", user.username, user.serial_id)
        logger.info("Activation completed: users_activated=%s", len(activated))
        return 0
    except Exception as e:
        logger.exception("Activation job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
