"""Exception hierarchy for litestar-signing.

Every failure raised by the automaton or the step compiler belongs to one of
three categories: malformed input (:class:`BadRequestError`, and the
:class:`ForbiddenError` / :class:`NotFoundError` refinements), business-rule
violation (:class:`ConflictError`), or caller bug (:class:`InternalError`).
Each category carries the HTTP status and the stable error code the web layer
renders.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = (
    "ActorNotEligibleError",
    "ActorPermissionError",
    "BadRequestError",
    "ConflictError",
    "DocumentNotActionableError",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "ParticipantNotFoundError",
    "ScenarioConflictError",
    "ScenarioValidationError",
    "SigningError",
    "SplitNotAllowedError",
    "WorkflowTerminatedError",
    "WrongProcessTagError",
)


class SigningError(Exception):
    """Base exception for all litestar-signing errors.

    All exceptions raised by litestar-signing inherit from this class, so callers
    can catch every workflow failure with a single except clause.

    Attributes:
        status_code: HTTP status the error maps to.
        code: Stable machine-readable error code.
    """

    status_code: ClassVar[int] = 500
    code: ClassVar[str] = "INTERNAL_ERROR"
    default_message: ClassVar[str] = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description. Falls back to the class default.
        """
        super().__init__(message or self.default_message)


class BadRequestError(SigningError):
    """Raised for malformed input the caller must correct before retrying."""

    status_code = 400
    code = "ERR_BAD_REQUEST"
    default_message = "Bad request"


class ForbiddenError(SigningError):
    """Raised when an actor lacks the entitlement required by a step."""

    status_code = 403
    code = "ERR_FORBIDDEN"
    default_message = "Forbidden"


class NotFoundError(SigningError):
    """Raised when a referenced actor or document cannot be resolved."""

    status_code = 404
    code = "ERR_NOT_FOUND"
    default_message = "Not found"


class ConflictError(SigningError):
    """Raised when a request is well formed but violates the workflow state.

    Conflicts are deterministic for a given snapshot: retrying the same request
    against the same snapshot always fails again.
    """

    status_code = 409
    code = "ERR_CONFLICT"
    default_message = "Conflict"


class InternalError(SigningError):
    """Raised on invariant violations the engine never produces by itself.

    These signal a bug in the caller's persistence or transaction discipline and
    should never be retried.
    """


class WorkflowTerminatedError(ConflictError):
    """Raised when an action is applied to an automaton with no step left."""

    def __init__(self, message: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Optional detail about where termination was detected.
        """
        super().__init__(message or "Workflow already terminated")


class WrongProcessTagError(ConflictError):
    """Raised when an action's process tag does not match the current step.

    Attributes:
        expected: Tag of the current step.
        received: Tag carried by the action.
    """

    def __init__(self, expected: str, received: str) -> None:
        """Initialize the exception with both tags.

        Args:
            expected: Tag of the current step.
            received: Tag carried by the action.
        """
        self.expected = expected
        self.received = received
        super().__init__(f"Wrong process tag '{received}' for this step (expected '{expected}')")


class ActorNotEligibleError(ConflictError):
    """Raised when an actor is not eligible for, or already fulfilled, the current step.

    Attributes:
        actor_id: The rejected actor.
    """

    def __init__(self, actor_id: int) -> None:
        """Initialize the exception with the actor identifier.

        Args:
            actor_id: The rejected actor.
        """
        self.actor_id = actor_id
        super().__init__(f"Actor {actor_id} is not eligible or already fulfilled this step")


class DocumentNotActionableError(ConflictError):
    """Raised when a document cannot receive the actor's action at the current step.

    Attributes:
        document_id: The rejected document.
        actor_id: The acting actor.
        reason: Which rule rejected the document.
    """

    def __init__(self, document_id: int, actor_id: int, reason: str) -> None:
        """Initialize the exception with document details.

        Args:
            document_id: The rejected document.
            actor_id: The acting actor.
            reason: Which rule rejected the document.
        """
        self.document_id = document_id
        self.actor_id = actor_id
        self.reason = reason
        super().__init__(f"Document {document_id} cannot be acted on by actor {actor_id}: {reason}")


class ScenarioValidationError(BadRequestError):
    """Raised when a scenario definition is incomplete or inconsistent.

    Attributes:
        errors: Every violation found, in discovery order.
    """

    def __init__(self, errors: Iterable[str]) -> None:
        """Initialize the exception with validation errors.

        Args:
            errors: Every violation found.
        """
        self.errors = list(errors)
        super().__init__(f"Unspecified or inconsistent items: {', '.join(self.errors)}")


class ScenarioConflictError(ConflictError):
    """Raised when a well-formed scenario definition contradicts itself.

    Attributes:
        errors: Every conflict found, in discovery order.
    """

    def __init__(self, errors: Iterable[str]) -> None:
        """Initialize the exception with conflict messages.

        Args:
            errors: Every conflict found.
        """
        self.errors = list(errors)
        super().__init__(f"Conflicted items: {', '.join(self.errors)}")


class ActorPermissionError(ForbiddenError):
    """Raised when a participant lacks the role tag a step requires.

    Attributes:
        participant: Reference of the offending participant.
        tag: Process tag of the step.
    """

    def __init__(self, participant: str, tag: str, verb: str) -> None:
        """Initialize the exception with participant details.

        Args:
            participant: Reference of the offending participant.
            tag: Process tag of the step.
            verb: What the participant tried to do (approve, sign, send).
        """
        self.participant = participant
        self.tag = tag
        super().__init__(f"Actor '{participant}' cannot {verb} with tag '{tag}'")


class ParticipantNotFoundError(NotFoundError):
    """Raised when a participant reference resolves to no actor.

    Attributes:
        participant: The unresolved reference.
    """

    def __init__(self, participant: str) -> None:
        """Initialize the exception with the unresolved reference.

        Args:
            participant: The unresolved reference.
        """
        self.participant = participant
        super().__init__(f"Actor '{participant}' not found")


class SplitNotAllowedError(ConflictError):
    """Raised when an automaton has no step boundary to split at."""

    def __init__(self) -> None:
        """Initialize the exception."""
        super().__init__("Workflow cannot be split at its current position")
