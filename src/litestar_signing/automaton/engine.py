"""Signing automaton engine.

This module provides the :class:`Automaton`, an ordered sequence of
:class:`~litestar_signing.automaton.node.Node` plus a cursor on the current
step, and the transitions applied to it when actors act.

Automatons are immutable values. Every transition returns a new automaton and
never touches the one it was called on, so a caller can persist each snapshot
and rely on its storage layer to detect concurrent modifications.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from litestar_signing.automaton.node import Node, NodeSpec, SigningTarget, _unique
from litestar_signing.exceptions import (
    ActorNotEligibleError,
    DocumentNotActionableError,
    InternalError,
    SplitNotAllowedError,
    WorkflowTerminatedError,
    WrongProcessTagError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from litestar_signing.core.types import LocalID

__all__ = ["Automaton", "PendingWork", "SplitAutomatons"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingWork:
    """What is left to do at the current step.

    Only one process can be active at a time, so pending work is a single tag
    with its targets rather than a mapping.

    Attributes:
        tag: Process tag actions must carry.
        items: Open documents with the actors who may still act on them.
    """

    tag: str
    items: tuple[SigningTarget, ...]

    def as_mapping(self) -> dict[str, list[SigningTarget]]:
        """Return the work keyed by process tag."""
        return {self.tag: list(self.items)}


@dataclass(frozen=True)
class SplitAutomatons:
    """Result of splitting an automaton at a step boundary.

    Attributes:
        previous: The consumed prefix, positioned at its end.
        next: The remaining steps, positioned at their start.
    """

    previous: Automaton
    next: Automaton


@dataclass(frozen=True)
class Automaton:
    """Progress of a signing workflow through its steps.

    Attributes:
        nodes: Ordered steps.
        index: Position of the current step. ``len(nodes)`` once terminated.

    Example:
        >>> automaton = Automaton.empty().append(
        ...     NodeSpec(
        ...         step_index=0,
        ...         role_type=RoleType.SIGNATURE,
        ...         tag="cosign",
        ...         aids=(1, 2),
        ...         dids=(10,),
        ...         concerned_actors=2,
        ...     )
        ... )
        >>> automaton = automaton.apply_action(1, "cosign", [10])
        >>> automaton = automaton.apply_action(2, "cosign", [10])
        >>> automaton.is_at_end()
        True
    """

    nodes: tuple[Node, ...] = ()
    index: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.index <= len(self.nodes):
            msg = f"Automaton index {self.index} out of range for {len(self.nodes)} nodes"
            raise InternalError(msg)

    @classmethod
    def empty(cls) -> Automaton:
        """Return an automaton with no step."""
        return cls()

    def append(self, spec: NodeSpec) -> Automaton:
        """Return a copy of the automaton with one more step.

        Args:
            spec: Participants, documents and cardinality of the new step.

        Returns:
            The extended automaton.
        """
        return replace(self, nodes=(*self.nodes, Node.create(spec)))

    def current_node(self) -> Node | None:
        """The node at the cursor, or ``None`` once terminated."""
        if self.index >= len(self.nodes):
            return None
        return self.nodes[self.index]

    def pending_work(self) -> PendingWork | None:
        """What remains to be done at the current step.

        Returns:
            The current tag with its signing targets, or ``None`` if there is no
            current step or nobody can act at it.
        """
        node = self.current_node()
        if node is None:
            return None
        targets = node.remaining_signing_targets()
        if not targets:
            return None
        return PendingWork(tag=node.tag, items=tuple(targets))

    def is_at_start(self) -> bool:
        """True if no actor acted on any document yet."""
        if self.index != 0 or not self.nodes:
            return False
        node = self.nodes[0]
        return not node.done_dids and node.working_documents_count() == 0

    def is_at_end(self) -> bool:
        """True if no step is left to act on."""
        count = len(self.nodes)
        if not count or self.index >= count:
            return True
        return self.index == count - 1 and not self.nodes[self.index].dids

    def involved_actor_ids(self) -> tuple[LocalID, ...]:
        """Every actor of every step, regardless of progress, in first-seen order."""
        return _unique(aid for node in self.nodes for aid in node.involved_actor_ids())

    def apply_action(self, aid: LocalID, tag: str, dids: Iterable[LocalID]) -> Automaton:
        """Apply one actor action and return the resulting automaton.

        Finished steps at the cursor are skipped first. The action is then
        validated as a whole before anything is recorded, so either the full
        action is applied or an error is raised.

        Args:
            aid: The acting actor.
            tag: Process tag of the action.
            dids: Documents the actor acts on.

        Returns:
            The automaton after the action.

        Raises:
            WorkflowTerminatedError: If no step is left.
            WrongProcessTagError: If ``tag`` is not the current step's tag.
            ActorNotEligibleError: If the actor may not act at the current step.
            DocumentNotActionableError: If a document cannot receive the action.
        """
        count = len(self.nodes)
        index = self.index
        if index >= count:
            raise WorkflowTerminatedError

        while index < count and self.nodes[index].is_finished():
            index += 1
        if index >= count:
            raise WorkflowTerminatedError

        node = self.nodes[index]
        if tag != node.tag:
            raise WrongProcessTagError(expected=node.tag, received=tag)

        if aid not in node.aids or aid in node.done_aids:
            raise ActorNotEligibleError(aid)

        requested = list(dict.fromkeys(dids))
        positions = [self._check_document(node, aid, did) for did in requested]

        working = [list(actors) for actors in node.working_documents]
        for position in positions:
            working[position].append(aid)

        open_dids: list[LocalID] = []
        open_working: list[tuple[LocalID, ...]] = []
        done_dids = list(node.done_dids)
        acted_on = 0
        for did, actors in zip(node.dids, working):
            if aid in actors:
                acted_on += 1
            if len(actors) >= node.concerned_actors:
                done_dids.append(did)
            else:
                open_dids.append(did)
                open_working.append(tuple(actors))

        aids = node.aids
        done_aids = node.done_aids
        if acted_on >= node.concerned_actors:
            aids = tuple(actor for actor in aids if actor != aid)
            done_aids = (*done_aids, aid)

        new_node = replace(
            node,
            aids=aids,
            dids=tuple(open_dids),
            working_documents=tuple(open_working),
            done_aids=done_aids,
            done_dids=tuple(done_dids),
        )
        nodes = (*self.nodes[:index], new_node, *self.nodes[index + 1 :])

        if not new_node.dids:
            logger.debug("Step %d (%s) completed by actor %s", index, node.tag, aid)
            index += 1
        else:
            logger.debug("Actor %s acted on %s at step %d (%s)", aid, requested, index, node.tag)

        return Automaton(nodes=nodes, index=index)

    def split_point(self) -> int | None:
        """Index at which the automaton can be split.

        Returns:
            The index of the first step of the continuation, or ``None`` if the
            automaton is at its start, at its end, or in the middle of a
            document's signature.
        """
        if self.is_at_end() or self.is_at_start():
            return None
        node = self.nodes[self.index]
        if not node.dids:
            return self.index + 1
        if node.working_documents_count() > 0:
            return None
        return self.index

    def split(self) -> SplitAutomatons | None:
        """Split the automaton into a consumed prefix and a fresh continuation.

        Returns:
            The two automatons, or ``None`` if there is no split point.
        """
        point = self.split_point()
        if point is None:
            return None
        logger.debug("Splitting automaton of %d steps at %d", len(self.nodes), point)
        return SplitAutomatons(
            previous=Automaton(nodes=self.nodes[:point], index=point),
            next=Automaton(nodes=self.nodes[point:], index=0),
        )

    def split_or_raise(self) -> SplitAutomatons:
        """Like :meth:`split` but raise when there is no split point.

        Raises:
            SplitNotAllowedError: If the automaton cannot be split.
        """
        result = self.split()
        if result is None:
            raise SplitNotAllowedError
        return result

    def to_dict(self) -> dict[str, Any]:
        """Serialize the automaton into JSON-compatible data."""
        return {"nodes": [node.to_dict() for node in self.nodes], "index": self.index}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Automaton:
        """Load an automaton serialized by :meth:`to_dict`.

        Args:
            data: Serialized automaton.

        Returns:
            The automaton.

        Raises:
            InternalError: If ``data`` is not a serialized automaton.
        """
        try:
            nodes = tuple(Node.from_dict(node) for node in data["nodes"])
            index = int(data["index"])
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Malformed automaton: {e}"
            raise InternalError(msg) from e
        return cls(nodes=nodes, index=index)

    @staticmethod
    def _check_document(node: Node, aid: LocalID, did: LocalID) -> int:
        if did in node.done_dids:
            raise DocumentNotActionableError(did, aid, "already complete at this step")
        position = node.position_of(did)
        if position is None:
            raise DocumentNotActionableError(did, aid, "not found at this step")
        acted = node.working_documents[position]
        if len(acted) >= node.concerned_actors:
            raise DocumentNotActionableError(did, aid, "every needed actor already acted on it")
        if aid in acted:
            raise DocumentNotActionableError(did, aid, "already acted on by this actor")
        return position
