"""Configuration for litestar-signing.

This module provides the :class:`SigningConfig` dataclass used by the
:class:`~litestar_signing.plugin.SigningPlugin` and by callers wiring the
builder by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from litestar_signing.builder import WorkflowBuilder
from litestar_signing.core.policy import TagPolicy

__all__ = ["SigningConfig"]


@dataclass
class SigningConfig:
    """Configuration for signing workflows.

    Attributes:
        approval_categories: Approval tags accepted on top of ``approval``
            (e.g. ``"legal-review"``). Each resolves to an approval step.
        dependency_key_policy: Dependency injection key of the TagPolicy.
            Defaults to "tag_policy".
        dependency_key_builder: Dependency injection key of the WorkflowBuilder.
            Defaults to "workflow_builder".
        register_exception_handlers: Whether the plugin renders
            :class:`~litestar_signing.exceptions.SigningError` as JSON responses.
            Defaults to True.

    Example:
        >>> config = SigningConfig(approval_categories=["legal-review", "hr"])
        >>> config.build_policy().resolve("hr")
        <RoleType.APPROVAL: 'approval'>
    """

    approval_categories: list[str] = field(default_factory=list)
    dependency_key_policy: str = "tag_policy"
    dependency_key_builder: str = "workflow_builder"
    register_exception_handlers: bool = True

    def build_policy(self) -> TagPolicy:
        """Create the tag policy described by this configuration.

        Raises:
            ValueError: If an approval category redefines an existing tag.
        """
        return TagPolicy(approval_categories=self.approval_categories)

    def build_builder(self, policy: TagPolicy | None = None) -> WorkflowBuilder:
        """Create a workflow builder.

        Args:
            policy: Policy to use. Built from this configuration if omitted.
        """
        return WorkflowBuilder(policy or self.build_policy())
