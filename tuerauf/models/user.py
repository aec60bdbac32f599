"""ORM model for registered door users (one row per installation)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from tuerauf.models.base import Base

# Field constraints checked on registration.
USERNAME_MIN_LEN = 2
PIN_LEN = 4
INSTALLATION_ID_MIN_LEN = 10


class User(Base):
    """
    A user of the door, identified by the app installation that registered it.

    serial_id is the user's slot in the fixed-size PIN table of the door controller.
    installation_id never changes after creation. The unique constraints on
    installation_id, username and serial_id turn concurrent registrations that
    race into IntegrityErrors instead of duplicates.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    installation_id = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    # Cleared once the pin has been delivered to the door controller.
    pin = Column(String(PIN_LEN), nullable=True)
    serial_id = Column(Integer, nullable=False, unique=True)
    active = Column(Boolean, nullable=False, default=False)
    new_user = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return (
            f"User(id={self.id!r}, username={self.username!r}, serial_id={self.serial_id!r}, "
            f"active={self.active!r}, new_user={self.new_user!r})"
        )
