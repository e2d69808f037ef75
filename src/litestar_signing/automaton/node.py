"""Automaton nodes.

A node is one step of the signing automaton: who may act, which documents are
still open, and how far each open document has progressed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar_signing.core.types import LocalID, RoleType
from litestar_signing.exceptions import InternalError

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["Node", "NodeSpec", "SigningTarget"]


@dataclass(frozen=True)
class NodeSpec:
    """Everything needed to create a fresh node.

    Attributes:
        step_index: Position of the authored step this node comes from.
        role_type: Kind of action the node requires.
        tag: Process tag actions must carry.
        aids: Actors allowed to act.
        dids: Documents to act on.
        concerned_actors: Distinct actors needed to complete a document.
    """

    step_index: int
    role_type: RoleType
    tag: str
    aids: tuple[LocalID, ...]
    dids: tuple[LocalID, ...]
    concerned_actors: int


@dataclass(frozen=True)
class SigningTarget:
    """A document still open at the current node and who may still act on it.

    Attributes:
        did: The open document.
        aids: Eligible actors who have not acted on it yet.
    """

    did: LocalID
    aids: tuple[LocalID, ...]


@dataclass(frozen=True)
class Node:
    """One step of a signing automaton.

    ``working_documents[i]`` lists the actors who already acted on ``dids[i]``.
    A document leaves ``dids`` for ``done_dids`` once ``concerned_actors``
    actors acted on it, and an actor leaves ``aids`` for ``done_aids`` once it
    acted on ``concerned_actors`` documents of the node.

    Attributes:
        step_index: Position of the authored step this node comes from.
        role_type: Kind of action the node requires.
        tag: Process tag actions must carry.
        aids: Actors still allowed to act.
        dids: Documents still open, in authored order.
        concerned_actors: Distinct actors needed to complete a document.
        working_documents: Per open document, the actors who acted on it.
        done_aids: Actors who fulfilled their quota.
        done_dids: Documents completed at this node.
    """

    step_index: int
    role_type: RoleType
    tag: str
    aids: tuple[LocalID, ...]
    dids: tuple[LocalID, ...]
    concerned_actors: int
    working_documents: tuple[tuple[LocalID, ...], ...]
    done_aids: tuple[LocalID, ...] = ()
    done_dids: tuple[LocalID, ...] = ()
    _document_positions: dict[LocalID, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.working_documents) != len(self.dids):
            msg = (
                f"Node for step {self.step_index} has {len(self.working_documents)} working documents "
                f"for {len(self.dids)} documents"
            )
            raise InternalError(msg)
        object.__setattr__(self, "_document_positions", {did: i for i, did in enumerate(self.dids)})

    @classmethod
    def create(cls, spec: NodeSpec) -> Node:
        """Create a node with no progress.

        Args:
            spec: Participants, documents and cardinality of the node.

        Returns:
            A node with one empty progress entry per document.
        """
        return cls(
            step_index=spec.step_index,
            role_type=RoleType(spec.role_type),
            tag=spec.tag,
            aids=tuple(spec.aids),
            dids=tuple(spec.dids),
            concerned_actors=spec.concerned_actors,
            working_documents=tuple(() for _ in spec.dids),
        )

    def position_of(self, did: LocalID) -> int | None:
        """Index of ``did`` in :attr:`dids`, or ``None`` if it is not open."""
        return self._document_positions.get(did)

    def working_documents_count(self) -> int:
        """Number of open documents with partial progress.

        Returns:
            Count of documents some, but not enough, actors acted on.
        """
        if not self.dids:
            return 0
        return sum(1 for actors in self.working_documents if 0 < len(actors) < self.concerned_actors)

    def remaining_signing_targets(self) -> list[SigningTarget]:
        """Open documents with the eligible actors who have not acted on them.

        Documents no eligible actor can still act on are left out.

        Returns:
            One target per actionable document, in document order.
        """
        targets = []
        for did, acted in zip(self.dids, self.working_documents):
            remaining = tuple(aid for aid in self.aids if aid not in acted)
            if remaining:
                targets.append(SigningTarget(did=did, aids=remaining))
        return targets

    def involved_actor_ids(self) -> tuple[LocalID, ...]:
        """Every actor of the node, whether finished or not."""
        return _unique((*self.aids, *self.done_aids))

    def is_finished(self) -> bool:
        """True if no document is open or no eligible actor is left to act."""
        return not self.dids or all(aid in self.done_aids for aid in self.aids)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the node into JSON-compatible data."""
        return {
            "step_index": self.step_index,
            "role_type": self.role_type.name,
            "tag": self.tag,
            "aids": list(self.aids),
            "dids": list(self.dids),
            "concerned_actors": self.concerned_actors,
            "working_documents": [list(actors) for actors in self.working_documents],
            "done_aids": list(self.done_aids),
            "done_dids": list(self.done_dids),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Node:
        """Load a node serialized by :meth:`to_dict`.

        Args:
            data: Serialized node.

        Returns:
            The node.

        Raises:
            InternalError: If ``data`` is not a serialized node.
        """
        try:
            return cls(
                step_index=int(data["step_index"]),
                role_type=RoleType[data["role_type"]],
                tag=str(data["tag"]),
                aids=tuple(data["aids"]),
                dids=tuple(data["dids"]),
                concerned_actors=int(data["concerned_actors"]),
                working_documents=tuple(tuple(actors) for actors in data["working_documents"]),
                done_aids=tuple(data.get("done_aids", ())),
                done_dids=tuple(data.get("done_dids", ())),
            )
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Malformed automaton node: {e}"
            raise InternalError(msg) from e


def _unique(ids: Iterable[LocalID]) -> tuple[LocalID, ...]:
    return tuple(dict.fromkeys(ids))
