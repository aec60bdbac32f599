from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tuerauf.models.user import User


class UserRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_all(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.serial_id)))

    def find_by_installation_id(self, installation_id: str) -> User | None:
        """Installation ids are unique, so there is at most one match."""
        stmt = select(User).where(User.installation_id == installation_id)
        return self.session.scalars(stmt).one_or_none()

    def find_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return self.session.scalars(stmt).one_or_none()

    def find_by_serial_id(self, serial_id: int) -> User | None:
        stmt = select(User).where(User.serial_id == serial_id)
        return self.session.scalars(stmt).one_or_none()

    def find_by_active(self, active: bool) -> list[User]:
        stmt = select(User).where(User.active.is_(active)).order_by(User.serial_id)
        return list(self.session.scalars(stmt))

    def find_pending_new(self) -> list[User]:
        """Users not yet activated that never re-registered."""
        stmt = (
            select(User)
            .where(User.active.is_(False), User.new_user.is_(True))
            .order_by(User.serial_id)
        )
        return list(self.session.scalars(stmt))

    def occupied_serial_ids(self) -> list[int]:
        """Serial ids held by existing users; only the column is loaded."""
        return list(self.session.scalars(select(User.serial_id)))

    def save(self, user: User) -> User:
        """Add (or re-attach) the user and flush so uniqueness violations surface here."""
        self.session.add(user)
        self.session.flush()
        return user

    def delete(self, user: User) -> None:
        self.session.delete(user)
        self.session.flush()

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(User)) or 0
