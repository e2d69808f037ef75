"""Signing history of a session.

The step compiler checks new steps against everything already approved, signed
or sent in the owning session. The caller builds a :class:`SigningHistory` from
its persisted event log and hands it to the compiler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from litestar_signing.core.types import LocalID, RoleType

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

__all__ = ["DocumentTally", "SignatureRecord", "SigningHistory"]


@dataclass(frozen=True)
class SignatureRecord:
    """One past action recorded in a session.

    Attributes:
        did: Document the action was taken on.
        aid: Actor who took the action.
        role_type: Kind of action taken.
    """

    did: LocalID
    aid: LocalID
    role_type: RoleType


@dataclass
class DocumentTally:
    """Actors who approved, signed or sent one document.

    Attributes:
        approvers: Actors who approved the document.
        signers: Actors who signed the document.
        expeditors: Actors the document was sent to.
    """

    approvers: set[LocalID] = field(default_factory=set)
    signers: set[LocalID] = field(default_factory=set)
    expeditors: set[LocalID] = field(default_factory=set)

    def actors_for(self, role_type: RoleType) -> set[LocalID]:
        """Return the set tracking ``role_type``.

        Args:
            role_type: Kind of action.

        Returns:
            The mutable set of actors for that kind of action.
        """
        if role_type == RoleType.APPROVAL:
            return self.approvers
        if role_type == RoleType.SIGNATURE:
            return self.signers
        return self.expeditors

    def copy(self) -> DocumentTally:
        """Return an independent copy of the tally."""
        return DocumentTally(set(self.approvers), set(self.signers), set(self.expeditors))


class SigningHistory:
    """Per-document tally of past approvals, signatures and expeditions.

    Example:
        >>> history = SigningHistory.from_records(
        ...     [SignatureRecord(did=10, aid=1, role_type=RoleType.SIGNATURE)],
        ... )
        >>> history.tally(10).signers
        {1}
        >>> history.tally(11).signers
        set()
    """

    def __init__(self, tallies: dict[LocalID, DocumentTally] | None = None) -> None:
        """Initialize the history.

        Args:
            tallies: Existing tallies keyed by document id.
        """
        self._tallies: dict[LocalID, DocumentTally] = dict(tallies or {})

    @classmethod
    def from_records(cls, records: Iterable[SignatureRecord]) -> SigningHistory:
        """Build a history by replaying recorded actions.

        Args:
            records: Past actions, in any order.

        Returns:
            The resulting history.
        """
        history = cls()
        for record in records:
            history.record(record.did, record.aid, record.role_type)
        return history

    def record(self, did: LocalID, aid: LocalID, role_type: RoleType) -> None:
        """Record that ``aid`` took an action of ``role_type`` on ``did``."""
        self._tally_for_update(did).actors_for(role_type).add(aid)

    def tally(self, did: LocalID) -> DocumentTally:
        """Return a copy of the tally of ``did``, empty if nothing was recorded."""
        tally = self._tallies.get(did)
        return tally.copy() if tally is not None else DocumentTally()

    def copy(self) -> SigningHistory:
        """Return an independent deep copy of the history."""
        return SigningHistory({did: tally.copy() for did, tally in self._tallies.items()})

    def _tally_for_update(self, did: LocalID) -> DocumentTally:
        tally = self._tallies.get(did)
        if tally is None:
            tally = self._tallies[did] = DocumentTally()
        return tally

    def __contains__(self, did: object) -> bool:
        return did in self._tallies

    def __iter__(self) -> Iterator[LocalID]:
        return iter(self._tallies)

    def __len__(self) -> int:
        return len(self._tallies)
