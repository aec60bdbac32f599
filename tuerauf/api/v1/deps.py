"""FastAPI dependencies that build the user services for one request session."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from tuerauf.core.config import Settings, get_settings
from tuerauf.core.database import get_db
from tuerauf.core.notifier import LogAndMailNotifier, get_notifier
from tuerauf.repositories import UserRepository
from tuerauf.services.registration import RegistrationService
from tuerauf.services.serial_id import SerialIdAllocator
from tuerauf.services.users import UserService


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserService:
    return UserService(db, UserRepository(db), max_serial_id=settings.MAX_SERIAL_ID)


def get_registration_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    notifier: Annotated[LogAndMailNotifier, Depends(get_notifier)],
) -> RegistrationService:
    users = UserRepository(db)
    allocator = SerialIdAllocator(users, notifier, max_serial_id=settings.MAX_SERIAL_ID)
    return RegistrationService(
        db,
        users,
        allocator,
        notifier,
        max_attempts=settings.REGISTRATION_MAX_ATTEMPTS,
    )
