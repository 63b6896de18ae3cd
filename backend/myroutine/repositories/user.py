"""User repository."""

from __future__ import annotations

from sqlalchemy import select

from myroutine.models.user import User

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence operations for :class:`~myroutine.models.user.User`."""

    model = User

    def _updatable_fields(self) -> set[str]:
        return {
            "email",
            "name",
            "last_name",
            "username",
            "date_birth",
            "theme",
            "experience",
            "weight_unit",
            "goal",
            "rating",
            "profile_photo_public_id",
            "profile_photo_url",
        }

    def get_by_email(self, email: str) -> User | None:
        """Return the user with ``email`` (case-insensitive), if any."""
        stmt = select(User).where(User.email == email.strip().lower())
        return self.session.execute(stmt).scalars().first()

    def exists_by_email(self, email: str) -> bool:
        return self.exists(email=email.strip().lower())

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when ``password`` matches; ``None`` otherwise."""
        user = self.get_by_email(email)
        if user is None or not user.verify_password(password):
            return None
        return user

    def update_password(self, user: User, raw_password: str) -> User:
        user.password = raw_password
        self.flush()
        return user

    def delete_by_id(self, user_id: int) -> int:
        return self.delete_where(User.id == user_id)
