"""Collaborator protocols for litestar-signing.

The step compiler never looks up process tags through a module global. It is
handed an object satisfying :class:`RoleTypeResolver` instead, usually a
:class:`~litestar_signing.core.policy.TagPolicy`.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Final, Literal, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection

    from litestar_signing.core.types import RoleType

__all__ = ["UNSET", "ResolvedRole", "RoleTypeResolver", "Unset"]


class Unset(Enum):
    """Marker type for a process tag that was left empty."""

    TOKEN = 0

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = Unset.TOKEN
"""Returned by a resolver for an empty or blank tag."""

ResolvedRole: TypeAlias = "RoleType | Literal[Unset.TOKEN] | None"
"""A role type, :data:`UNSET` for an empty tag, or ``None`` for an unknown tag."""


@runtime_checkable
class RoleTypeResolver(Protocol):
    """Protocol for the tag policy consumed by the step compiler.

    Example:
        >>> class OnlyCosign:
        ...     def resolve(self, tag):
        ...         return RoleType.SIGNATURE if tag == "cosign" else None
        ...
        ...     def is_entitled(self, role_type, tag, role_tags):
        ...         return "sign" in role_tags or tag in role_tags
    """

    def resolve(self, tag: str | None) -> ResolvedRole:
        """Map a process tag to the role type it requires.

        Args:
            tag: The process tag as authored.

        Returns:
            The role type, :data:`UNSET` if the tag is empty, ``None`` if unknown.
        """
        ...

    def is_entitled(self, role_type: RoleType, tag: str, role_tags: Collection[str]) -> bool:
        """Check whether an actor holding ``role_tags`` may take part in a step.

        Args:
            role_type: Role type of the step.
            tag: Process tag of the step.
            role_tags: Role tags granted to the actor.

        Returns:
            True if the actor is entitled to the step's process.
        """
        ...
