"""Generic repository base for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Safe sorting with a whitelist mapping (prevents SQL injection).
- Safe update helpers with per-repository updatable-field whitelists.
- Bulk, row-count-returning deletes used by the deletion orchestrator.
- No business logic, no commit/rollback; services own transactions.

Design decisions
----------------
* Repositories never call commit/rollback; a Unit of Work does.
* Sorting is opt-in per aggregate via ``_sortable_fields``.
* Updates never allow mass-assignment: each repository exposes an explicit
  ``_updatable_fields`` whitelist.
* User-owned tables share :class:`UserScopedRepository`, so every query and
  delete is scoped by ``user_id``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import ColumnElement, Select, delete, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from myroutine.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single table.

    Subclasses MUST define ``model``. They MAY override ``_sortable_fields``
    and ``_updatable_fields``.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``myroutine.core.extensions``.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """Whitelist mapping of public sort keys to model attributes."""
        return {}

    def _updatable_fields(self) -> set[str]:
        """Whitelist of public keys that can be assigned on update."""
        return set()

    # ------------------------------ Internals --------------------------------

    def _apply_sort(
        self, stmt: Select[Any], sort_by: str | None, descending: bool = False
    ) -> Select[Any]:
        """Order by a whitelisted key, falling back to the primary key.

        :raises ValueError: If ``sort_by`` is not whitelisted.
        """
        pk = self._pk_attr()
        if sort_by is None:
            return stmt.order_by(pk.asc()) if pk is not None else stmt
        column = self._sortable_fields().get(sort_by)
        if column is None:
            raise ValueError(f"Unsupported sort key: {sort_by}")
        ordered = stmt.order_by(column.desc() if descending else column.asc())
        return ordered.order_by(pk.asc()) if pk is not None else ordered

    def _sanitize_update_fields(
        self,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Return a dict with only whitelisted update keys.

        :raises ValueError: If ``strict`` and unknown keys are present.
        """
        allowed = self._updatable_fields()
        if not allowed:
            if fields and strict:
                raise ValueError("No updatable fields configured for this repository.")
            return {}

        unknown = [k for k in fields if k not in allowed]
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")

        return {k: v for k, v in fields.items() if k in allowed}

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush to materialize its primary key."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :raises RuntimeError: If no PK attribute can be detected.
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        stmt = select(self.model).where(pk_attr == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        """Find a single entity by simple equality filters."""
        stmt = select(self.model).filter_by(**filters)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def find_all(self, **filters: Any) -> list[E]:
        """Return every entity matching simple equality filters."""
        stmt = self._apply_sort(select(self.model).filter_by(**filters), None)
        return list(self.session.execute(stmt).scalars())

    def exists(self, **filters: Any) -> bool:
        """Return ``True`` when at least one row matches the equality filters."""
        stmt = select(select(self.model).filter_by(**filters).exists())
        return bool(self.session.execute(stmt).scalar())

    def assign_updates(self, instance: E, fields: Mapping[str, Any]) -> E:
        """Apply whitelisted field updates to ``instance`` and flush.

        :raises ValueError: On non-updatable keys.
        """
        for key, value in self._sanitize_update_fields(fields).items():
            setattr(instance, key, value)
        self.flush()
        return instance

    def delete(self, instance: E) -> None:
        """Hard delete a loaded entity and flush."""
        self.session.delete(instance)
        self.flush()

    def delete_where(self, *criteria: ColumnElement[bool]) -> int:
        """Delete every row matching ``criteria`` and return the row count.

        An empty ``criteria`` is rejected to avoid truncating the table.
        """
        if not criteria:
            raise ValueError("delete_where requires at least one criterion.")
        stmt = delete(self.model).where(*criteria)
        result = self.session.execute(stmt)
        return int(result.rowcount or 0)

    def flush(self) -> None:
        self.session.flush()


class UserScopedRepository(BaseRepository[E]):
    """Repository for tables carrying a ``user_id`` owner column."""

    def list_by_user(
        self,
        user_id: int,
        *,
        sort_by: str | None = None,
        descending: bool = False,
    ) -> list[E]:
        stmt = select(self.model).where(self.model.user_id == user_id)  # type: ignore[attr-defined]
        stmt = self._apply_sort(stmt, sort_by, descending)
        return list(self.session.execute(stmt).scalars())

    def get_for_user(self, user_id: int, entity_id: int) -> E | None:
        """Return the entity only when it belongs to ``user_id``."""
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("get_for_user requires a detectable PK attribute.")
        stmt = select(self.model).where(
            pk_attr == entity_id,
            self.model.user_id == user_id,  # type: ignore[attr-defined]
        )
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def delete_by_user(self, user_id: int) -> int:
        """Delete every row owned by ``user_id``; return the row count."""
        return self.delete_where(self.model.user_id == user_id)  # type: ignore[attr-defined]


class ExerciseScopedRepository(UserScopedRepository[E]):
    """Repository for exercise children carrying ``(user_id, exercise_id)``."""

    def list_by_exercise(self, user_id: int, exercise_id: int) -> list[E]:
        stmt = select(self.model).where(
            self.model.user_id == user_id,  # type: ignore[attr-defined]
            self.model.exercise_id == exercise_id,  # type: ignore[attr-defined]
        )
        stmt = self._apply_sort(stmt, None)
        return list(self.session.execute(stmt).scalars())

    def delete_by_user_exercise(self, user_id: int, exercise_id: int) -> int:
        """Delete every row of ``exercise_id`` owned by ``user_id``."""
        return self.delete_where(
            self.model.user_id == user_id,  # type: ignore[attr-defined]
            self.model.exercise_id == exercise_id,  # type: ignore[attr-defined]
        )
