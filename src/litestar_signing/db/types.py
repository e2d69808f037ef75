"""SQLAlchemy column type for automaton snapshots.

The automaton is stored as a JSON blob on the caller's workflow record. This
module provides the column type doing the conversion; tables, sessions and
optimistic locking remain the caller's concern.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import TypeDecorator

from litestar_signing.automaton.engine import Automaton

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect

__all__ = ["AutomatonType", "JSONType"]


# Cross-database JSON type: uses JSONB for PostgreSQL, JSON for others (SQLite, MySQL, etc.)
JSONType = JSON().with_variant(JSONB, "postgresql")


class AutomatonType(TypeDecorator[Automaton]):
    """Column type binding an :class:`~litestar_signing.automaton.engine.Automaton`.

    Example:
        >>> class ScenarioModel(Base):
        ...     __tablename__ = "scenarios"
        ...     id: Mapped[int] = mapped_column(primary_key=True)
        ...     automaton: Mapped[Automaton] = mapped_column(AutomatonType)
        ...     version: Mapped[int] = mapped_column()
        ...     __mapper_args__ = {"version_id_col": version}
    """

    impl = JSONType
    cache_ok = True

    def process_bind_param(self, value: Automaton | None, dialect: Dialect) -> dict[str, Any] | None:
        if value is None:
            return None
        return value.to_dict()

    def process_result_value(self, value: dict[str, Any] | None, dialect: Dialect) -> Automaton | None:
        if value is None:
            return None
        return Automaton.from_dict(value)
