"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import ForgotPasswordSchema, LoginSchema, RegisterSchema, ResetPasswordSchema
from .catalog import DaySchema, MuscleGroupSchema, PhotoSchema, ScheduleSchema
from .common import ListQuerySchema, MessageSchema
from .exercise import ExerciseCreateSchema, ExerciseSchema, ExerciseUpdateSchema
from .routine import (
    RoutineCreateSchema,
    RoutineExerciseSchema,
    RoutineSchema,
    RoutineUpdateSchema,
)
from .set import SetCreateSchema, SetSchema, SetUpdateSchema
from .user import FeedbackCreateSchema, FeedbackSchema, UserSchema, UserUpdateSchema

__all__ = [
    "DaySchema",
    "ExerciseCreateSchema",
    "ExerciseSchema",
    "ExerciseUpdateSchema",
    "FeedbackCreateSchema",
    "FeedbackSchema",
    "ForgotPasswordSchema",
    "ListQuerySchema",
    "LoginSchema",
    "MessageSchema",
    "MuscleGroupSchema",
    "PhotoSchema",
    "RegisterSchema",
    "ResetPasswordSchema",
    "RoutineCreateSchema",
    "RoutineExerciseSchema",
    "RoutineSchema",
    "RoutineUpdateSchema",
    "ScheduleSchema",
    "SetCreateSchema",
    "SetSchema",
    "SetUpdateSchema",
    "UserSchema",
    "UserUpdateSchema",
]
