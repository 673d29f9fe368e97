"""Repository-layer exceptions.

Raised by repositories when the database rejects a write. Services catch these
and translate them into domain exceptions.
"""

from __future__ import annotations

import asyncpg


class RepositoryError(Exception):
    """Base exception for repository layer errors."""

    def __init__(self, message: str, **context: object) -> None:
        self.message = message
        self.context = context
        super().__init__(message)


class ConstraintViolationError(RepositoryError):
    """A database constraint rejected the write."""

    kind = "constraint"

    def __init__(self, constraint_name: str, table: str, detail: str | None = None) -> None:
        """Initialize constraint violation.

        Args:
            constraint_name: Name of the violated constraint or unique index.
            table: Table the write targeted.
            detail: Detail line reported by Postgres, if any.
        """
        super().__init__(
            f"{self.kind.capitalize()} constraint '{constraint_name}' violated on table '{table}'",
            constraint_name=constraint_name,
            table=table,
            detail=detail,
        )
        self.constraint_name = constraint_name
        self.table = table
        self.detail = detail


class UniqueConstraintViolationError(ConstraintViolationError):
    kind = "unique"


class ForeignKeyViolationError(ConstraintViolationError):
    kind = "foreign key"


class CheckConstraintViolationError(ConstraintViolationError):
    kind = "check"


_ASYNCPG_TRANSLATIONS: tuple[tuple[type[asyncpg.PostgresError], type[ConstraintViolationError]], ...] = (
    (asyncpg.UniqueViolationError, UniqueConstraintViolationError),
    (asyncpg.ForeignKeyViolationError, ForeignKeyViolationError),
    (asyncpg.CheckViolationError, CheckConstraintViolationError),
)


def extract_constraint_name(error: Exception) -> str | None:
    """Return the constraint name asyncpg attaches to integrity errors."""
    return getattr(error, "constraint_name", None)


def translate_integrity_error(error: asyncpg.PostgresError, table: str) -> RepositoryError:
    """Convert an asyncpg integrity error into the matching repository exception.

    Args:
        error: The asyncpg exception.
        table: Table the failing statement targeted.

    Returns:
        The repository exception to raise in its place.
    """
    for asyncpg_type, repo_type in _ASYNCPG_TRANSLATIONS:
        if isinstance(error, asyncpg_type):
            return repo_type(
                extract_constraint_name(error) or "unknown",
                table,
                getattr(error, "detail", None),
            )
    return RepositoryError(str(error), table=table)
