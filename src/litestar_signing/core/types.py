"""Core type definitions for litestar-signing.

This module defines the enums and type aliases shared by the automaton, the
step compiler and the surrounding service.
"""

from __future__ import annotations

import sys
from enum import Enum, IntEnum, auto
from typing import TypeAlias

# StrEnum backport for Python < 3.11
if sys.version_info >= (3, 11):
    from enum import StrEnum
else:

    class StrEnum(str, Enum):
        """String enumeration compatibility for Python < 3.11."""

        @staticmethod
        def _generate_next_value_(name: str, start: int, count: int, last_values: list[str]) -> str:
            return name.lower()

        def __str__(self) -> str:
            return str(self.value)


__all__ = [
    "LocalID",
    "RoleType",
    "SignatureFormat",
    "SignatureLevel",
    "SignatureType",
    "SigningProcess",
]


LocalID: TypeAlias = int
"""Identifier of an actor or a document inside its owning session."""


class RoleType(StrEnum):
    """Classification of what a step requires of its participants.

    Attributes:
        APPROVAL: Participants approve the documents.
        SIGNATURE: Participants sign the documents.
        EXPEDITION: Participants receive the signed documents.
    """

    APPROVAL = auto()
    SIGNATURE = auto()
    EXPEDITION = auto()


class SigningProcess(StrEnum):
    """Built-in process tags.

    Approval categories beyond ``approval`` are defined by configuration and
    are plain strings, see :class:`~litestar_signing.core.policy.TagPolicy`.

    Attributes:
        APPROVAL: Generic approval.
        SIGN: Generic signing entitlement. Never valid as a step process.
        COSIGN: Any ``cardinality`` participants sign each document, in any order.
        COUNTERSIGN: Every participant signs, one after the other.
        ORDERED_COSIGN: Every participant cosigns, one after the other.
        INDIVIDUAL_SIGN: Participants sign independently.
        TO: Primary recipient of the signed documents.
        CC: Copy recipient of the signed documents.
    """

    APPROVAL = "approval"
    SIGN = "sign"
    COSIGN = "cosign"
    COUNTERSIGN = "countersign"
    ORDERED_COSIGN = "ordered-cosign"
    INDIVIDUAL_SIGN = "individual-sign"
    TO = "to"
    CC = "cc"


class SignatureFormat(IntEnum):
    """Signature container formats."""

    PADES = 1
    XADES = 2
    CADES = 3


class SignatureLevel(IntEnum):
    """Signature levels, from basic to long-term archival."""

    B = 1
    T = 2
    LT = 3
    LTA = 4


class SignatureType(IntEnum):
    """Position of the signature relative to the signed content.

    Attributes:
        ENVELOPED: The signature lives inside the document (the only PAdES type).
        ENVELOPING: The document lives inside the signature.
        DETACHED: The signature is a separate file.
    """

    ENVELOPED = 1
    ENVELOPING = 2
    DETACHED = 3
