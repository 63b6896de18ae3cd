"""Persistence-only repositories, one per table."""

from .credential import CredentialRepository, InvalidTokenRepository
from .exercise import (
    ExerciseRepository,
    MuscleGroupRepository,
    PhotoRepository,
    RepetitionSetRepository,
    SetRepository,
    TimeSetRepository,
    WorksOnRepository,
)
from .feedback import FeedbackRepository
from .routine import (
    ComposedByRepository,
    DayRepository,
    RoutineRepository,
    ScheduledDayRepository,
)
from .user import UserRepository

__all__ = [
    "ComposedByRepository",
    "CredentialRepository",
    "DayRepository",
    "ExerciseRepository",
    "FeedbackRepository",
    "InvalidTokenRepository",
    "MuscleGroupRepository",
    "PhotoRepository",
    "RepetitionSetRepository",
    "RoutineRepository",
    "ScheduledDayRepository",
    "SetRepository",
    "TimeSetRepository",
    "UserRepository",
    "WorksOnRepository",
]
