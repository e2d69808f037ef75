"""Signing automaton.

This module exports the automaton, its nodes and the values its queries return.
"""

from __future__ import annotations

from litestar_signing.automaton.engine import Automaton, PendingWork, SplitAutomatons
from litestar_signing.automaton.node import Node, NodeSpec, SigningTarget

__all__ = [
    "Automaton",
    "Node",
    "NodeSpec",
    "PendingWork",
    "SigningTarget",
    "SplitAutomatons",
]
