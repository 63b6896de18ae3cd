"""Feedback repository."""

from __future__ import annotations

from myroutine.models.feedback import Feedback

from .base import UserScopedRepository


class FeedbackRepository(UserScopedRepository[Feedback]):
    model = Feedback
