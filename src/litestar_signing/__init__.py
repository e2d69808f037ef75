"""Litestar Signing - Multi-party approval and signature workflows for Litestar.

This package compiles declarative signing steps into a deterministic automaton
and advances that automaton as actors approve, sign or receive documents.

Key Features:
    - Approval, signature and expedition steps with per-document cardinality
    - Sequential countersign and ordered-cosign decomposition
    - Signing-history checks against double approval, signature or expedition
    - Immutable automaton snapshots ready for JSON persistence
    - Split of a paused workflow into a finished part and a fresh continuation
    - Litestar plugin and SQLAlchemy column type

Example:
    >>> from litestar_signing import Participant, StepDefinition, TagPolicy, WorkflowBuilder
    >>>
    >>> result = WorkflowBuilder(TagPolicy()).build(
    ...     steps=[StepDefinition(process="cosign", participants=["alice", "bob"], signature_type=1)],
    ...     documents=[10],
    ...     participants={"alice": Participant.of(1, ["sign"]), "bob": Participant.of(2, ["sign"])},
    ... )
    >>> automaton = result.automaton.apply_action(1, "cosign", [10])
    >>> automaton.is_at_end()
    True
"""

from __future__ import annotations

from litestar_signing.__metadata__ import __project__, __version__
from litestar_signing.automaton import Automaton, Node, NodeSpec, PendingWork, SigningTarget, SplitAutomatons
from litestar_signing.builder import Participant, WorkflowBuilder, WorkflowBuildResult
from litestar_signing.config import SigningConfig
from litestar_signing.core import (
    RoleType,
    ScenarioDefinition,
    SignatureFormat,
    SignatureLevel,
    SignatureRecord,
    SignatureType,
    SigningHistory,
    SigningProcess,
    StepDefinition,
    TagPolicy,
)
from litestar_signing.exceptions import (
    ActorNotEligibleError,
    ActorPermissionError,
    BadRequestError,
    ConflictError,
    DocumentNotActionableError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ParticipantNotFoundError,
    ScenarioConflictError,
    ScenarioValidationError,
    SigningError,
    SplitNotAllowedError,
    WorkflowTerminatedError,
    WrongProcessTagError,
)
from litestar_signing.plugin import SigningPlugin

__all__ = (
    "ActorNotEligibleError",
    "ActorPermissionError",
    "Automaton",
    "BadRequestError",
    "ConflictError",
    "DocumentNotActionableError",
    "ForbiddenError",
    "InternalError",
    "Node",
    "NodeSpec",
    "NotFoundError",
    "Participant",
    "ParticipantNotFoundError",
    "PendingWork",
    "RoleType",
    "ScenarioConflictError",
    "ScenarioDefinition",
    "ScenarioValidationError",
    "SignatureFormat",
    "SignatureLevel",
    "SignatureRecord",
    "SignatureType",
    "SigningConfig",
    "SigningError",
    "SigningHistory",
    "SigningPlugin",
    "SigningProcess",
    "SigningTarget",
    "SplitAutomatons",
    "StepDefinition",
    "TagPolicy",
    "WorkflowBuildResult",
    "WorkflowBuilder",
    "WorkflowTerminatedError",
    "WrongProcessTagError",
    "__project__",
    "__version__",
)
