"""Service layer public API.

Callers can import from :mod:`myroutine.services` without knowing the
internal structure.

Re-exports
----------
- Base primitives (from ``myroutine.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Sessions and accounts
    * :class:`SessionService`, :class:`AuthService`, :class:`UserService`
    * :class:`AggregateDeletionService`

- Training data
    * :class:`ExerciseService`, :class:`RoutineService`, :class:`SetService`,
      :class:`PhotoService`, :class:`CatalogService`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext
from .auth.service import AuthService
from .cascade.service import AggregateDeletionService
from .catalog.service import CatalogService
from .exercises.service import ExerciseService
from .photos.service import PhotoService
from .routines.service import RoutineService
from .session.service import SessionService
from .sets.service import SetService
from .users.service import UserService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Accounts
    "AggregateDeletionService",
    "AuthService",
    "SessionService",
    "UserService",
    # Training data
    "CatalogService",
    "ExerciseService",
    "PhotoService",
    "RoutineService",
    "SetService",
]
