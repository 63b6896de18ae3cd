# myroutine/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass

from myroutine.core import errors as api_errors
from myroutine.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    InvalidCredentialsError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    TokenError,
)
from myroutine.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data.

    :param actor_id: Authenticated user identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services never touch the global session; they always use a Unit of Work.
    - Every user-owned read or write is scoped by ``actor_id``.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, enforce_db_readonly: bool = True) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(enforce_db_readonly=enforce_db_readonly)

    # -------------------------- Scoping -------------------------------------

    def require_actor(self) -> int:
        """
        Return the acting user id.

        :raises AuthenticationError: When the context carries no actor.
        """
        if self.ctx.actor_id is None:
            raise AuthenticationError("no actor in service context")
        return self.ctx.actor_id

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, InvalidCredentialsError):
            return api_errors.Unauthorized(exc.reason)

        if isinstance(exc, AuthenticationError | TokenError):
            # → 401, generic message
            return api_errors.Unauthorized()

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        if isinstance(exc, PersistenceError):
            return api_errors.InternalError(
                "Operation failed and was rolled back",
                details={"step": exc.step, "completed": list(exc.completed)},
            )

        if isinstance(exc, ExternalServiceError):
            return api_errors.BadGateway(str(exc))

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code="bad_request",
            )

        return exc
