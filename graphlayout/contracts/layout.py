"""
Layout Contracts

Configuration and output types of the layout pipeline.

GUARANTEES:
===========
1. Every output type is frozen; a new layout replaces the old one whole
2. Coordinates are top-left corners in the global canvas
3. Output ordering is deterministic (partitioner order, then rank order)
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from enum import Enum
from typing import Callable, Iterator, Mapping, Optional, Tuple
import math
import os

from .base import ConfigError, Edge, LayoutIssue, Node, NodeKind


# =============================================================================
# PARTITION KEYS
# =============================================================================

def by_source(edge: Edge) -> str:
    """Anchor an edge (and its endpoints) on its source node."""
    return edge.source


def by_target(edge: Edge) -> str:
    """Anchor an edge (and its endpoints) on its target node."""
    return edge.target


PARTITION_KEYS = {
    "source": by_source,
    "target": by_target,
}


# =============================================================================
# ORIENTATION
# =============================================================================

class RankDirection(Enum):
    """Direction in which ranks advance."""
    TOP_BOTTOM = "TB"
    LEFT_RIGHT = "LR"


class AttachmentSide(Enum):
    """Side of a node box where edges attach."""
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


ATTACHMENT_SIDES = {
    # direction -> (target side, source side)
    RankDirection.TOP_BOTTOM: (AttachmentSide.TOP, AttachmentSide.BOTTOM),
    RankDirection.LEFT_RIGHT: (AttachmentSide.LEFT, AttachmentSide.RIGHT),
}


# =============================================================================
# CONFIGURATION
# =============================================================================

ENV_PREFIX = "GRAPHLAYOUT_"


@dataclass(frozen=True)
class LayoutConfig:
    """
    Layout parameters.

    Defaults follow the viewer's dagre setup: 180x50 boxes,
    100px node separation, 120px rank separation.
    """
    node_width: float = 180.0
    node_height: float = 50.0
    node_gap: float = 100.0
    rank_gap_min: float = 120.0
    rank_gap_per_node: float = 10.0
    cluster_gap_base: float = 300.0
    cluster_gap_per_node: float = 60.0
    cluster_vertical_stride: float = 40.0
    partition_key: Callable[[Edge], str] = by_source
    ordering_passes: int = 2
    rank_direction: RankDirection = RankDirection.TOP_BOTTOM
    strict_integrity: bool = False

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, float) and not math.isfinite(value):
                raise ConfigError(f"{f.name} must be finite")
        for name in ("node_width", "node_height"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")
        for name in (
            "node_gap", "rank_gap_min", "rank_gap_per_node",
            "cluster_gap_base", "cluster_gap_per_node", "cluster_vertical_stride",
        ):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")
        if self.ordering_passes < 0:
            raise ConfigError("ordering_passes must not be negative")
        if not callable(self.partition_key):
            raise ConfigError("partition_key must be callable")

    def rank_gap(self, node_count: int) -> float:
        """Adaptive rank gap: dense clusters get more vertical room."""
        return max(self.rank_gap_min, node_count * self.rank_gap_per_node)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> LayoutConfig:
        """
        Build a config from GRAPHLAYOUT_* variables.

        Example: GRAPHLAYOUT_NODE_WIDTH=200, GRAPHLAYOUT_RANK_DIRECTION=LR,
        GRAPHLAYOUT_PARTITION_KEY=target, GRAPHLAYOUT_STRICT_INTEGRITY=1.
        """
        environ = os.environ if environ is None else environ
        overrides = {}

        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            try:
                overrides[f.name] = _parse_env_value(f.name, raw)
            except (KeyError, ValueError) as e:
                raise ConfigError(
                    f"Invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r}"
                ) from e

        return cls(**overrides)


def _parse_env_value(name: str, raw: str):
    if name == "partition_key":
        return PARTITION_KEYS[raw.strip().lower()]
    if name == "rank_direction":
        return RankDirection(raw.strip().upper())
    if name == "strict_integrity":
        value = raw.strip().lower()
        if value in ("1", "true", "yes", "on"):
            return True
        if value in ("0", "false", "no", "off"):
            return False
        raise ValueError(raw)
    if name == "ordering_passes":
        return int(raw)
    return float(raw)


# =============================================================================
# CLUSTERS
# =============================================================================

@dataclass(frozen=True)
class Cluster:
    """
    Layout-time grouping of edges sharing an anchor.
    Derived and non-persistent; a node may appear in several clusters.
    """
    anchor_id: str
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]

    @property
    def node_count(self) -> int:
        return len(self.nodes)


# =============================================================================
# POSITIONED OUTPUT
# =============================================================================

@dataclass(frozen=True)
class PositionedNode:
    """Node placed on the canvas (x, y is the top-left corner)."""
    node: Node
    x: float
    y: float
    width: float
    height: float
    rank: int
    order: int
    cluster_id: str
    target_side: AttachmentSide
    source_side: AttachmentSide

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def kind(self) -> NodeKind:
        return self.node.kind

    @property
    def color_key(self) -> str:
        return self.node.kind.value

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def translated(self, dx: float, dy: float) -> PositionedNode:
        """Return a copy moved by (dx, dy)."""
        return PositionedNode(
            node=self.node,
            x=self.x + dx,
            y=self.y + dy,
            width=self.width,
            height=self.height,
            rank=self.rank,
            order=self.order,
            cluster_id=self.cluster_id,
            target_side=self.target_side,
            source_side=self.source_side,
        )


@dataclass(frozen=True)
class PositionedEdge:
    """Edge routed between two positioned nodes of the same cluster."""
    edge: Edge
    cluster_id: str
    source_side: AttachmentSide
    target_side: AttachmentSide
    is_back_edge: bool = False

    @property
    def id(self) -> str:
        return self.edge.id

    @property
    def label(self) -> str:
        return self.edge.label


@dataclass(frozen=True)
class ClusterLayout:
    """Layout of one cluster in its local frame ((0, 0) = top-left)."""
    anchor_id: str
    nodes: Tuple[PositionedNode, ...]
    edges: Tuple[PositionedEdge, ...]
    width: float
    height: float
    rank_count: int
    max_rank_width: int
    cycle_edges: Tuple[Edge, ...] = ()

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes


@dataclass(frozen=True)
class ClusterPlacement:
    """Where a cluster landed on the shared canvas."""
    anchor_id: str
    index: int
    offset_x: float
    offset_y: float
    width: float
    height: float
    node_count: int

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom)"""
        return (
            self.offset_x,
            self.offset_y,
            self.offset_x + self.width,
            self.offset_y + self.height,
        )

    def intersects(self, other: ClusterPlacement) -> bool:
        left, top, right, bottom = self.bounds
        o_left, o_top, o_right, o_bottom = other.bounds
        return left < o_right and o_left < right and top < o_bottom and o_top < bottom


@dataclass(frozen=True)
class LayoutResult:
    """
    Complete output of one layout pass.

    Unpacks as `(nodes, edges)`.
    """
    nodes: Tuple[PositionedNode, ...] = ()
    edges: Tuple[PositionedEdge, ...] = ()
    clusters: Tuple[ClusterPlacement, ...] = ()
    issues: Tuple[LayoutIssue, ...] = ()

    def __iter__(self) -> Iterator[tuple]:
        yield self.nodes
        yield self.edges

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node(self, node_id: str, cluster_id: Optional[str] = None) -> Optional[PositionedNode]:
        """First positioned instance of a node, optionally within one cluster."""
        for positioned in self.nodes:
            if positioned.id != node_id:
                continue
            if cluster_id is None or positioned.cluster_id == cluster_id:
                return positioned
        return None
