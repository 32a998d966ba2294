"""
Base Contracts and Shared Types

Foundational graph types used across the engine, the loader and the
presentation layer. All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- Node `type` drives presentation only, never layout
- Identity is the `id` field; objects are replaced, never mutated
- Error states are enumerated explicitly (no silent fallbacks)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Tuple


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class IssueCode(Enum):
    """
    Explicit issue codes recorded during a layout pass.
    Every non-fatal condition is enumerated.
    """
    # Integrity
    DANGLING_EDGE = auto()
    DUPLICATE_NODE = auto()
    DUPLICATE_EDGE = auto()

    # Structure
    CYCLE_DETECTED = auto()
    ORPHAN_NODE = auto()


@dataclass(frozen=True)
class LayoutIssue:
    """
    Immutable issue representation with context.
    Issues are data, not exceptions - they are stored on the result.
    """
    code: IssueCode
    message: str
    subject_id: str = ""
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: str) -> LayoutIssue:
        """Return new issue with additional context (immutable)."""
        return LayoutIssue(
            code=self.code,
            message=self.message,
            subject_id=self.subject_id,
            context=self.context + ((key, value),)
        )

    @property
    def is_integrity(self) -> bool:
        return self.code in (
            IssueCode.DANGLING_EDGE,
            IssueCode.DUPLICATE_NODE,
            IssueCode.DUPLICATE_EDGE,
        )


class ConfigError(ValueError):
    """Invalid layout configuration."""


class IntegrityError(Exception):
    """
    Raised in strict mode when the document references missing ids
    or repeats an id.
    """

    def __init__(self, issue: LayoutIssue):
        super().__init__(issue.message)
        self.issue = issue


class CycleWarning(UserWarning):
    """Rank assignment found a cycle and reversed a back-edge."""


# =============================================================================
# NODE KINDS (Closed enumeration, total resolution)
# =============================================================================

class NodeKind(Enum):
    """
    Closed set of entity kinds.

    TOTAL MAPPING:
    ==============
    Any raw type string resolves to exactly one member;
    unrecognised strings resolve to UNKNOWN.
    """
    PERSON = "person"
    EMAIL = "email"
    DOMAIN = "domain"
    COMPANY = "company"
    SOCIAL = "social"
    RISK = "risk"
    PROFILE = "profile"
    UNKNOWN = "unknown"

    @classmethod
    def resolve(cls, raw: str) -> NodeKind:
        key = (raw or "").strip().lower()
        for member in cls:
            if member.value == key:
                return member
        return cls.UNKNOWN


# =============================================================================
# GRAPH TYPES
# =============================================================================

@dataclass(frozen=True)
class Node:
    """Entity in the graph. Identity is `id`."""
    id: str
    label: str
    type: str = NodeKind.UNKNOWN.value

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("Node id must be a non-empty string")

    @property
    def kind(self) -> NodeKind:
        return NodeKind.resolve(self.type)


@dataclass(frozen=True)
class Edge:
    """Directed relationship between two nodes."""
    id: str
    source: str
    target: str
    label: str = ""

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("Edge id must be a non-empty string")

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


@dataclass(frozen=True)
class GraphDocument:
    """
    A loaded graph description.
    Replaced as a whole on every load (no partial update).
    """
    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges
