"""Process tag policy.

Maps process tags to the role type they require and decides whether an actor's
role tags entitle it to a step.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from litestar_signing.core.protocols import UNSET
from litestar_signing.core.types import RoleType, SigningProcess

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from litestar_signing.core.protocols import ResolvedRole

__all__ = [
    "DEFAULT_APPROVAL_TAGS",
    "DEFAULT_EXPEDITION_TAGS",
    "DEFAULT_SIGNATURE_TAGS",
    "TagPolicy",
]

DEFAULT_APPROVAL_TAGS: tuple[str, ...] = (SigningProcess.APPROVAL.value,)
DEFAULT_SIGNATURE_TAGS: tuple[str, ...] = (
    SigningProcess.SIGN.value,
    SigningProcess.COSIGN.value,
    SigningProcess.COUNTERSIGN.value,
    SigningProcess.ORDERED_COSIGN.value,
    SigningProcess.INDIVIDUAL_SIGN.value,
)
DEFAULT_EXPEDITION_TAGS: tuple[str, ...] = (SigningProcess.TO.value, SigningProcess.CC.value)


class TagPolicy:
    """Resolves process tags and role entitlements.

    The built-in signature and expedition tags are fixed. Approval tags are the
    generic ``approval`` tag plus any caller-defined approval categories.

    Attributes:
        approval_tags: Every tag resolving to :attr:`RoleType.APPROVAL`.

    Example:
        >>> policy = TagPolicy(approval_categories=["legal-review"])
        >>> policy.resolve("Legal-Review")
        <RoleType.APPROVAL: 'approval'>
        >>> policy.resolve("unknown") is None
        True
    """

    def __init__(self, approval_categories: Iterable[str] = ()) -> None:
        """Initialize the policy.

        Args:
            approval_categories: Extra approval tags defined by configuration.

        Raises:
            ValueError: If a category repeats a built-in tag or another category.
        """
        reserved = {*DEFAULT_APPROVAL_TAGS, *DEFAULT_SIGNATURE_TAGS, *DEFAULT_EXPEDITION_TAGS}
        approval_tags = list(DEFAULT_APPROVAL_TAGS)
        doubles: list[str] = []
        for category in approval_categories:
            tag = _normalize(category)
            if not tag or tag in reserved or tag in approval_tags:
                doubles.append(category)
            else:
                approval_tags.append(tag)

        if doubles:
            msg = f"Approval categories cannot redefine existing tags: {', '.join(map(repr, doubles))}"
            raise ValueError(msg)

        self.approval_tags: tuple[str, ...] = tuple(approval_tags)

    def resolve(self, tag: str | None) -> ResolvedRole:
        """Map a process tag to its role type.

        Args:
            tag: The tag as authored. Surrounding blanks and case are ignored.

        Returns:
            The role type, :data:`~litestar_signing.core.protocols.UNSET` for an
            empty tag, or ``None`` for an unknown or non-string tag.
        """
        if tag is None:
            return UNSET
        if not isinstance(tag, str):
            return None
        tag = _normalize(tag)
        if not tag:
            return UNSET
        if tag in DEFAULT_SIGNATURE_TAGS:
            return RoleType.SIGNATURE
        if tag in self.approval_tags:
            return RoleType.APPROVAL
        if tag in DEFAULT_EXPEDITION_TAGS:
            return RoleType.EXPEDITION
        return None

    def is_entitled(self, role_type: RoleType, tag: str, role_tags: Collection[str]) -> bool:
        """Check whether role tags entitle an actor to a step.

        Approval steps accept the generic ``approval`` tag or the step's own tag,
        signature steps accept the generic ``sign`` tag or the step's own tag, and
        expedition steps only accept the step's own tag.

        Args:
            role_type: Role type of the step.
            tag: Process tag of the step.
            role_tags: Role tags granted to the actor.

        Returns:
            True if the actor may take part in the step.
        """
        if tag in role_tags:
            return True
        if role_type == RoleType.APPROVAL:
            return SigningProcess.APPROVAL.value in role_tags
        if role_type == RoleType.SIGNATURE:
            return SigningProcess.SIGN.value in role_tags
        return False

    def __repr__(self) -> str:
        return f"TagPolicy(approval_tags={self.approval_tags!r})"


def _normalize(tag: str) -> str:
    return tag.strip().lower()
