"""Shared test fixtures for litestar-signing test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from litestar_signing.automaton.engine import Automaton
    from litestar_signing.automaton.node import NodeSpec
    from litestar_signing.builder import Participant, WorkflowBuilder
    from litestar_signing.core.policy import TagPolicy

ALICE, BOB, CAROL, DAVE = 1, 2, 3, 4
DOC_A, DOC_B, DOC_C = 101, 102, 103


def make_spec(
    aids: tuple[int, ...] = (ALICE, BOB),
    dids: tuple[int, ...] = (DOC_A,),
    concerned_actors: int = 2,
    tag: str = "cosign",
    step_index: int = 0,
    role_type: str = "signature",
) -> NodeSpec:
    """Create a node spec with sensible defaults.

    Args:
        aids: Eligible actors.
        dids: Documents of the node.
        concerned_actors: Cardinality of the node.
        tag: Process tag.
        step_index: Authored step index.
        role_type: Role type value.

    Returns:
        NodeSpec instance
    """
    from litestar_signing.automaton.node import NodeSpec
    from litestar_signing.core.types import RoleType

    return NodeSpec(
        step_index=step_index,
        role_type=RoleType(role_type),
        tag=tag,
        aids=aids,
        dids=dids,
        concerned_actors=concerned_actors,
    )


@pytest.fixture
def tag_policy() -> TagPolicy:
    """Create a tag policy with one extra approval category.

    Returns:
        TagPolicy instance
    """
    from litestar_signing.core.policy import TagPolicy

    return TagPolicy(approval_categories=["legal-review"])


@pytest.fixture
def workflow_builder(tag_policy: TagPolicy) -> WorkflowBuilder:
    """Create a workflow builder for testing.

    Args:
        tag_policy: Tag policy fixture

    Returns:
        WorkflowBuilder instance
    """
    from litestar_signing.builder import WorkflowBuilder

    return WorkflowBuilder(tag_policy)


@pytest.fixture
def participants() -> dict[str, Participant]:
    """Participant facts keyed by reference.

    alice and bob may sign, carol may approve, dave receives documents.

    Returns:
        Mapping of reference to Participant
    """
    from litestar_signing.builder import Participant

    return {
        "actors/alice": Participant.of(ALICE, ["sign", "approval"]),
        "actors/bob": Participant.of(BOB, ["sign"]),
        "actors/carol": Participant.of(CAROL, ["approval", "legal-review"]),
        "actors/dave": Participant.of(DAVE, ["to", "cc"]),
    }


@pytest.fixture
def cosign_automaton() -> Automaton:
    """One cosign step: alice and bob must both sign one document.

    Returns:
        Automaton instance
    """
    from litestar_signing.automaton.engine import Automaton

    return Automaton.empty().append(make_spec())


@pytest.fixture
def three_step_automaton() -> Automaton:
    """Approval by carol, cosign by alice and bob, expedition to dave, over two documents.

    Returns:
        Automaton instance
    """
    from litestar_signing.automaton.engine import Automaton

    dids = (DOC_A, DOC_B)
    return (
        Automaton.empty()
        .append(make_spec(aids=(CAROL,), dids=dids, concerned_actors=1, tag="approval", role_type="approval"))
        .append(make_spec(aids=(ALICE, BOB), dids=dids, concerned_actors=2, tag="cosign", step_index=1))
        .append(
            make_spec(aids=(DAVE,), dids=dids, concerned_actors=1, tag="to", step_index=2, role_type="expedition"),
        )
    )


@pytest.fixture
def node_spec():
    """Factory fixture building node specs, see :func:`make_spec`."""
    return make_spec
