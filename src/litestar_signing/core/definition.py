"""Declarative step and scenario definitions.

This module provides the structures a caller authors to describe a signing
workflow: the cardinality of a step, the steps themselves, and the scenario
grouping documents, signature format and steps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

from litestar_signing.core.protocols import UNSET
from litestar_signing.core.types import RoleType, SignatureFormat, SignatureLevel, SignatureType, SigningProcess
from litestar_signing.exceptions import BadRequestError, ScenarioConflictError, ScenarioValidationError

if TYPE_CHECKING:
    from litestar_signing.core.protocols import RoleTypeResolver

__all__ = [
    "All",
    "Cardinality",
    "Exact",
    "One",
    "ScenarioDefinition",
    "StepDefinition",
    "is_signature_type_compatible",
    "parse_cardinality",
]


@dataclass(frozen=True)
class All:
    """Every participant of the step must act on each document."""

    def resolve(self, participant_count: int) -> int:
        return participant_count


@dataclass(frozen=True)
class One:
    """A single participant of the step is enough for each document."""

    def resolve(self, participant_count: int) -> int:
        return 1


@dataclass(frozen=True)
class Exact:
    """An explicit number of participants must act on each document.

    Attributes:
        count: Required number of distinct actors.
    """

    count: int

    def resolve(self, participant_count: int) -> int:
        return self.count


Cardinality: TypeAlias = "All | One | Exact"


def parse_cardinality(raw: Any) -> Cardinality | None:
    """Parse the authored form of a cardinality.

    Args:
        raw: ``None``, ``"one"``, ``"all"``, or a positive integer.

    Returns:
        The parsed cardinality, or ``None`` when it was left unspecified.

    Raises:
        BadRequestError: If ``raw`` has any other form.

    Example:
        >>> parse_cardinality("all")
        All()
        >>> parse_cardinality(2)
        Exact(count=2)
    """
    if raw is None or isinstance(raw, (All, One, Exact)):
        return raw
    if isinstance(raw, str):
        text = raw.strip().lower()
        if text == "one":
            return One()
        if text == "all":
            return All()
        if text.isascii() and text.isdecimal():
            raw = int(text)
    if isinstance(raw, int) and not isinstance(raw, bool) and raw > 0:
        return Exact(raw)
    msg = f"Bad cardinality {raw!r}"
    raise BadRequestError(msg)


def is_signature_type_compatible(signature_type: SignatureType, signature_format: SignatureFormat | None) -> bool:
    """Check that a signature type can be produced in a signature format.

    PAdES only produces enveloped signatures and CAdES never does.

    Args:
        signature_type: Requested signature type.
        signature_format: Format of the workflow, if known.

    Returns:
        True if the combination is valid or the format is unknown.
    """
    if signature_format == SignatureFormat.PADES:
        return signature_type == SignatureType.ENVELOPED
    if signature_format == SignatureFormat.CADES:
        return signature_type != SignatureType.ENVELOPED
    return True


@dataclass
class StepDefinition:
    """One authored workflow step.

    Attributes:
        process: Process tag of the step (``cosign``, ``to``, an approval category...).
        participants: References of the participating actors, in order.
        signature_type: Signature type, required for signature steps only.
        cardinality: Authored cardinality: ``None``, ``"one"``, ``"all"`` or an int.

    Example:
        >>> step = StepDefinition(
        ...     process="countersign",
        ...     participants=["actors/1", "actors/2"],
        ...     signature_type=SignatureType.ENVELOPED,
        ... )
    """

    process: str
    participants: list[str] = field(default_factory=list)
    signature_type: SignatureType | int | None = None
    cardinality: Any = None

    @property
    def tag(self) -> str:
        """The process tag, trimmed and lowercased."""
        if self.process is None:
            return ""
        return str(self.process).strip().lower()

    def parsed_cardinality(self) -> Cardinality | None:
        """Parse :attr:`cardinality`.

        Returns:
            The cardinality, or ``None`` when unspecified.
        """
        return parse_cardinality(self.cardinality)

    def resolve_cardinality(self, role_type: RoleType, participant_count: int) -> int:
        """Resolve the cardinality into the number stored on automaton nodes.

        An unspecified cardinality means every participant for signature steps
        other than ``cosign``, and a single participant otherwise.

        Args:
            role_type: Role type of the step.
            participant_count: Number of distinct participants.

        Returns:
            The number of distinct actors needed to complete a document.
        """
        cardinality = self.parsed_cardinality()
        if cardinality is None:
            if role_type == RoleType.SIGNATURE and self.tag != SigningProcess.COSIGN:
                cardinality = All()
            else:
                cardinality = One()
        return cardinality.resolve(participant_count)


@dataclass
class ScenarioDefinition:
    """A complete workflow as authored: documents, signature settings and steps.

    Attributes:
        documents: Document references, in order.
        steps: Ordered step definitions.
        format: Signature format applied to every signature step.
        level: Signature level applied to every signature step.
    """

    documents: list[Any]
    steps: list[StepDefinition]
    format: SignatureFormat | int | None = None
    level: SignatureLevel | int | None = None

    def signature_format(self) -> SignatureFormat | None:
        """The signature format as an enum member, or ``None`` if invalid."""
        return _enum_member(SignatureFormat, self.format)

    def validate(self, resolver: RoleTypeResolver) -> tuple[list[str], list[str]]:
        """Validate the shape of the scenario.

        Args:
            resolver: Tag policy used to resolve step processes.

        Returns:
            A tuple ``(bad_request, conflicts)`` of error message lists. Both are
            empty if the scenario is well formed.

        Example:
            >>> bad_request, conflicts = scenario.validate(TagPolicy())
            >>> if bad_request:
            ...     print("Missing:", bad_request)
        """
        bad_request: list[str] = []
        conflicts: list[str] = []

        signature_format = self.signature_format()
        if signature_format is None:
            bad_request.append("bad signature format")
        if _enum_member(SignatureLevel, self.level) is None:
            bad_request.append("bad signature level")
        if not self.documents:
            bad_request.append("documents")

        if not self.steps:
            bad_request.append("steps")
            return bad_request, conflicts

        for index, step in enumerate(self.steps):
            if not isinstance(step, StepDefinition):
                bad_request.append(f"bad step[{index}] definition")
                continue

            role_type = resolver.resolve(step.process)
            if role_type is UNSET:
                bad_request.append(f"step[{index}].process")
            elif role_type is None or step.tag == SigningProcess.SIGN:
                bad_request.append(f"bad step[{index}].process tag '{step.process}'")

            if role_type == RoleType.SIGNATURE:
                signature_type = _enum_member(SignatureType, step.signature_type)
                if signature_type is None:
                    bad_request.append(f"bad step[{index}].signatureType:{step.signature_type}")
                elif not is_signature_type_compatible(signature_type, signature_format):
                    conflicts.append(
                        f"bad step[{index}].signatureType/format:{signature_type.value}/{self.format}",
                    )

            try:
                step.parsed_cardinality()
            except BadRequestError:
                bad_request.append(f"bad step[{index}].cardinality:{step.cardinality!r}")

            if not step.participants:
                bad_request.append(f"step[{index}].participants")

        return bad_request, conflicts

    def check(self, resolver: RoleTypeResolver) -> None:
        """Validate the scenario and raise on the first failing category.

        Args:
            resolver: Tag policy used to resolve step processes.

        Raises:
            ScenarioValidationError: If any item is missing or malformed.
            ScenarioConflictError: If items are well formed but contradict each other.
        """
        bad_request, conflicts = self.validate(resolver)
        if bad_request:
            raise ScenarioValidationError(bad_request)
        if conflicts:
            raise ScenarioConflictError(conflicts)


def _enum_member(enum_type: Any, value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return None
    try:
        return enum_type(value)
    except ValueError:
        return None
