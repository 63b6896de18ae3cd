# myroutine/services/users/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from myroutine.models.feedback import Feedback
from myroutine.models.user import User


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Public profile projection. Never carries the id or the password hash.
    """

    email: str
    name: str | None
    last_name: str | None
    username: str | None
    profile_photo: str | None
    date_birth: date | None
    theme: str | None
    experience: str | None
    weight_unit: str | None
    goal: str | None
    rating: int | None

    @classmethod
    def from_model(cls, user: User) -> UserOut:
        return cls(
            email=user.email,
            name=user.name,
            last_name=user.last_name,
            username=user.username,
            profile_photo=user.profile_photo_url,
            date_birth=user.date_birth,
            theme=user.theme,
            experience=user.experience,
            weight_unit=user.weight_unit,
            goal=user.goal,
            rating=user.rating,
        )


@dataclass(frozen=True, slots=True)
class PhotoUpload:
    """Raw image bytes received in a multipart request."""

    content: bytes
    filename: str | None = None


@dataclass(frozen=True, slots=True)
class FeedbackOut:
    id_feedback: int
    comment: str
    created_at: datetime | None

    @classmethod
    def from_model(cls, row: Feedback) -> FeedbackOut:
        return cls(id_feedback=row.id, comment=row.comment, created_at=row.created_at)
