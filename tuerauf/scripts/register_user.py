"""
Register a user (or update the user of an installation) without the app. Run from project root:
  python -m tuerauf.scripts.register_user USERNAME PIN INSTALLATION_ID [--activate]
Example:
  python -m tuerauf.scripts.register_user alice 1234 admin-console-01 --activate
"""
import argparse
import logging
import sys

from tuerauf.core.config import get_settings
from tuerauf.core.database import SessionLocal
from tuerauf.core.notifier import get_notifier
from tuerauf.repositories import UserRepository
from tuerauf.services.errors import UserServiceError
from tuerauf.services.registration import Rejected, RegistrationService
from tuerauf.services.serial_id import SerialIdAllocator
from tuerauf.services.users import UserService


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Register or update a door user.")
    parser.add_argument("username", help="Username (at least 2 chars)")
    parser.add_argument("pin", help="PIN (exactly 4 chars)")
    parser.add_argument("installation_id", help="Installation id (at least 10 chars)")
    parser.add_argument("--activate", action="store_true", help="Activate the user right away")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    settings = get_settings()
    notifier = get_notifier()
    db = SessionLocal()
    try:
        users = UserRepository(db)
        allocator = SerialIdAllocator(users, notifier, max_serial_id=settings.MAX_SERIAL_ID)
        service = RegistrationService(
            db, users, allocator, notifier, max_attempts=settings.REGISTRATION_MAX_ATTEMPTS
        )
        try:
            result = service.register_or_update(args.username, args.pin, args.installation_id)
        except UserServiceError as e:
            print(e.message, file=sys.stderr)
            return 1
        if isinstance(result, Rejected):
            print(result.error.message, file=sys.stderr)
            return 1

        user = result.user
        if args.activate:
            UserService(db, users, max_serial_id=settings.MAX_SERIAL_ID).activate([user])
        print(f"User '{user.username}' {result.status} with serialId {user.serial_id} (active={user.active}).")
        return 0
    finally:
        db.close()
        notifier.shutdown(wait=True)


if __name__ == "__main__":
    sys.exit(main())
