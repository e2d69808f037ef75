"""Core domain module for litestar-signing.

This module exports the building blocks of workflow definitions: types, the tag
policy, step and scenario definitions, and the signing history.
"""

from __future__ import annotations

from litestar_signing.core.definition import (
    All,
    Cardinality,
    Exact,
    One,
    ScenarioDefinition,
    StepDefinition,
    is_signature_type_compatible,
    parse_cardinality,
)
from litestar_signing.core.history import DocumentTally, SignatureRecord, SigningHistory
from litestar_signing.core.policy import TagPolicy
from litestar_signing.core.protocols import UNSET, RoleTypeResolver
from litestar_signing.core.types import (
    LocalID,
    RoleType,
    SignatureFormat,
    SignatureLevel,
    SignatureType,
    SigningProcess,
)

__all__ = [
    "UNSET",
    "All",
    "Cardinality",
    "DocumentTally",
    "Exact",
    "LocalID",
    "One",
    "RoleType",
    "RoleTypeResolver",
    "ScenarioDefinition",
    "SignatureFormat",
    "SignatureLevel",
    "SignatureRecord",
    "SignatureType",
    "SigningHistory",
    "SigningProcess",
    "StepDefinition",
    "TagPolicy",
    "is_signature_type_compatible",
    "parse_cardinality",
]
