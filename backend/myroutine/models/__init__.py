from myroutine.models.credential import Credential, InvalidToken
from myroutine.models.exercise import (
    Exercise,
    MuscleGroup,
    Photo,
    RepetitionSet,
    Set,
    TimeSet,
    WorksOn,
)
from myroutine.models.feedback import Feedback
from myroutine.models.routine import ComposedBy, Day, Routine, ScheduledDay
from myroutine.models.user import User

__all__ = [
    "ComposedBy",
    "Credential",
    "Day",
    "Exercise",
    "Feedback",
    "InvalidToken",
    "MuscleGroup",
    "Photo",
    "RepetitionSet",
    "Routine",
    "ScheduledDay",
    "Set",
    "TimeSet",
    "User",
    "WorksOn",
]
