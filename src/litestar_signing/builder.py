"""Workflow builder.

The builder compiles authored steps into a signing
:class:`~litestar_signing.automaton.engine.Automaton`. It checks every step
against the tag policy, the participants' entitlements and the signing history
of the owning session, then emits one or more automaton nodes per step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from litestar_signing.automaton.engine import Automaton
from litestar_signing.automaton.node import NodeSpec
from litestar_signing.core.definition import ScenarioDefinition, StepDefinition, is_signature_type_compatible
from litestar_signing.core.history import SigningHistory
from litestar_signing.core.protocols import UNSET
from litestar_signing.core.types import LocalID, RoleType, SignatureFormat, SignatureType, SigningProcess
from litestar_signing.exceptions import (
    ActorPermissionError,
    BadRequestError,
    ConflictError,
    InternalError,
    ParticipantNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping, Sequence

    from litestar_signing.core.protocols import RoleTypeResolver

__all__ = ["Participant", "WorkflowBuildResult", "WorkflowBuilder"]

logger = logging.getLogger(__name__)

_VERBS = {
    RoleType.APPROVAL: "approve",
    RoleType.SIGNATURE: "sign",
    RoleType.EXPEDITION: "send",
}


@dataclass(frozen=True)
class Participant:
    """Facts about a participant reference, supplied by the caller.

    Attributes:
        actor_id: The actor the reference resolves to.
        role_tags: Role tags granted to the actor.
    """

    actor_id: LocalID
    role_tags: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, actor_id: LocalID, role_tags: Iterable[str] = ()) -> Participant:
        """Build a participant from any iterable of role tags."""
        return cls(actor_id=actor_id, role_tags=frozenset(role_tags))


@dataclass(frozen=True)
class WorkflowBuildResult:
    """Output of :meth:`WorkflowBuilder.build`.

    Attributes:
        actor_ids: Every actor taking part, in first-seen order.
        document_ids: The workflow's documents, in order.
        automaton: The freshly built automaton.
    """

    actor_ids: tuple[LocalID, ...]
    document_ids: tuple[LocalID, ...]
    automaton: Automaton


class WorkflowBuilder:
    """Compiles authored steps into a signing automaton.

    Example:
        >>> builder = WorkflowBuilder(TagPolicy())
        >>> result = builder.build(
        ...     steps=[StepDefinition(process="countersign", participants=["a", "b"], signature_type=1)],
        ...     documents=[10, 11],
        ...     participants={"a": Participant.of(1, ["sign"]), "b": Participant.of(2, ["sign"])},
        ... )
        >>> len(result.automaton.nodes)
        2
    """

    def __init__(self, resolver: RoleTypeResolver) -> None:
        """Initialize the builder.

        Args:
            resolver: Tag policy resolving processes and entitlements.
        """
        self.resolver = resolver

    def build_scenario(
        self,
        scenario: ScenarioDefinition,
        participants: Mapping[str, Participant],
        history: SigningHistory | None = None,
    ) -> WorkflowBuildResult:
        """Validate a whole scenario and compile it.

        Args:
            scenario: The authored scenario. Its documents must already be ids.
            participants: Facts for every participant reference.
            history: Signing history of the owning session.

        Returns:
            The build result.

        Raises:
            ScenarioValidationError: If the scenario is malformed.
            ScenarioConflictError: If the scenario contradicts itself.
        """
        scenario.check(self.resolver)
        return self.build(
            steps=scenario.steps,
            documents=scenario.documents,
            participants=participants,
            history=history,
            signature_format=scenario.signature_format(),
        )

    def build(
        self,
        steps: Sequence[StepDefinition],
        documents: Sequence[LocalID],
        participants: Mapping[str, Participant],
        history: SigningHistory | None = None,
        signature_format: SignatureFormat | None = None,
    ) -> WorkflowBuildResult:
        """Compile steps over documents into an automaton.

        Args:
            steps: Authored steps, in order.
            documents: Documents every step applies to.
            participants: Facts for every participant reference.
            history: Signing history of the owning session. Never mutated.
            signature_format: Workflow signature format, checked against each
                signature step's type when given.

        Returns:
            The actors, the documents and the automaton.

        Raises:
            BadRequestError: If a step is malformed.
            ParticipantNotFoundError: If a participant reference is unknown.
            ActorPermissionError: If a participant lacks the step's entitlement.
            ConflictError: If a step contradicts the cardinality rules or the
                signing history.
        """
        document_ids = self._check_documents(documents)
        tally = history.copy() if history is not None else SigningHistory()
        actor_ids: dict[LocalID, None] = {}
        automaton = Automaton.empty()

        if not steps:
            msg = "A workflow needs at least one step"
            raise BadRequestError(msg)

        for index, step in enumerate(steps):
            tag = step.tag
            role_type = self.resolver.resolve(step.process)
            if role_type is UNSET:
                msg = f"step[{index}].process is missing"
                raise BadRequestError(msg)
            if role_type is None or tag == SigningProcess.SIGN:
                msg = f"bad step[{index}].process tag '{step.process}'"
                raise BadRequestError(msg)

            if role_type == RoleType.SIGNATURE:
                self._check_signature_type(index, step, signature_format)

            step_actor_ids = self._resolve_participants(index, step, role_type, participants)
            actor_ids.update(dict.fromkeys(step_actor_ids))

            cardinality = self._resolve_cardinality(index, step, role_type, len(step_actor_ids))
            self._record_history(index, role_type, step_actor_ids, document_ids, tally)

            for spec in self._node_specs(index, step, role_type, step_actor_ids, document_ids, cardinality):
                automaton = automaton.append(spec)

        logger.info(
            "Built signing workflow: %d steps, %d nodes, %d actors, %d documents",
            len(steps),
            len(automaton.nodes),
            len(actor_ids),
            len(document_ids),
        )
        return WorkflowBuildResult(
            actor_ids=tuple(actor_ids),
            document_ids=document_ids,
            automaton=automaton,
        )

    @staticmethod
    def _check_documents(documents: Sequence[LocalID]) -> tuple[LocalID, ...]:
        if not documents:
            msg = "A workflow needs at least one document"
            raise BadRequestError(msg)
        seen: dict[LocalID, None] = {}
        for did in documents:
            if did in seen:
                msg = f"Document {did} cannot be added twice"
                raise ConflictError(msg)
            seen[did] = None
        return tuple(seen)

    @staticmethod
    def _check_signature_type(index: int, step: StepDefinition, signature_format: SignatureFormat | None) -> None:
        try:
            signature_type = SignatureType(step.signature_type)
        except ValueError as e:
            msg = f"bad step[{index}].signatureType:{step.signature_type}"
            raise BadRequestError(msg) from e
        if not is_signature_type_compatible(signature_type, signature_format):
            msg = f"bad step[{index}].signatureType/format:{signature_type.value}/{signature_format}"
            raise ConflictError(msg)

    def _resolve_participants(
        self,
        index: int,
        step: StepDefinition,
        role_type: RoleType,
        participants: Mapping[str, Participant],
    ) -> list[LocalID]:
        if not step.participants:
            msg = f"step[{index}] has no participant"
            raise BadRequestError(msg)

        step_actor_ids: list[LocalID] = []
        for reference in step.participants:
            participant = participants.get(reference)
            if participant is None:
                raise ParticipantNotFoundError(reference)
            if participant.actor_id in step_actor_ids:
                msg = f"Actor '{reference}' is used twice in step[{index}]"
                raise BadRequestError(msg)
            if not self.resolver.is_entitled(role_type, step.tag, participant.role_tags):
                raise ActorPermissionError(reference, step.tag, _VERBS[role_type])
            step_actor_ids.append(participant.actor_id)
        return step_actor_ids

    @staticmethod
    def _resolve_cardinality(index: int, step: StepDefinition, role_type: RoleType, actor_count: int) -> int:
        cardinality = step.resolve_cardinality(role_type, actor_count)
        exact_only = step.tag in (SigningProcess.COUNTERSIGN, SigningProcess.ORDERED_COSIGN)
        if cardinality < 1 or cardinality > actor_count or (exact_only and cardinality != actor_count):
            msg = f"bad step[{index}].cardinality ({cardinality}) with process {step.tag}"
            raise ConflictError(msg)
        return cardinality

    @staticmethod
    def _record_history(
        index: int,
        role_type: RoleType,
        step_actor_ids: Collection[LocalID],
        document_ids: Sequence[LocalID],
        tally: SigningHistory,
    ) -> None:
        for did in document_ids:
            current = tally.tally(did)
            if role_type == RoleType.APPROVAL:
                if current.signers:
                    msg = f"step[{index}]: cannot approve document {did} because it is already signed"
                    raise ConflictError(msg)
                already, verb = current.approvers, "approve"
            elif role_type == RoleType.SIGNATURE:
                already, verb = current.signers, "sign"
            else:
                if not current.signers:
                    msg = f"step[{index}]: cannot send document {did} because it is not signed"
                    raise ConflictError(msg)
                already, verb = current.expeditors, "send"

            for aid in step_actor_ids:
                if aid in already:
                    msg = f"step[{index}]: actor {aid} cannot {verb} document {did} twice"
                    raise ConflictError(msg)
                tally.record(did, aid, role_type)

    @staticmethod
    def _node_specs(
        index: int,
        step: StepDefinition,
        role_type: RoleType,
        step_actor_ids: Sequence[LocalID],
        document_ids: tuple[LocalID, ...],
        cardinality: int,
    ) -> list[NodeSpec]:
        tag = step.tag
        aids = tuple(step_actor_ids)

        if role_type == RoleType.APPROVAL:
            return [NodeSpec(index, role_type, tag, aids, document_ids, cardinality)]

        if role_type == RoleType.SIGNATURE:
            if tag in (SigningProcess.INDIVIDUAL_SIGN, SigningProcess.COSIGN):
                return [NodeSpec(index, role_type, tag, aids, document_ids, cardinality)]
            if tag in (SigningProcess.COUNTERSIGN, SigningProcess.ORDERED_COSIGN):
                return [NodeSpec(index, role_type, tag, (aid,), document_ids, 1) for aid in aids]
            msg = f"Signing process '{tag}' not found"
            raise BadRequestError(msg)

        if role_type == RoleType.EXPEDITION:
            return [NodeSpec(index, role_type, tag, aids, document_ids, len(aids))]

        msg = f"Unsupported role type {role_type!r} for step[{index}]"
        raise InternalError(msg)
