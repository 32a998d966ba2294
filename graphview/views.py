"""
Graph View Contracts

Responsibility:
Deterministic transformation of a LayoutResult into renderable graph views.
The render adapter draws these as-is; it performs no layout of its own.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from graphlayout.contracts.layout import LayoutResult, PositionedEdge, PositionedNode

from .styles import BACK_EDGE_STYLE, DEFAULT_EDGE_STYLE, display_label, style_for


class AvailabilityState(Enum):
    """
    Availability of a view.

    EXPLICIT ABSENCE:
    =================
    An empty graph is MISSING, never an empty PRESENT view.
    """
    PRESENT = "present"
    MISSING = "missing"


def node_key(cluster_id: str, node_id: str) -> str:
    """Render key of a node instance (a node may sit in several clusters)."""
    return f"{cluster_id}/{node_id}"


@dataclass(frozen=True)
class GraphNodeView:
    """Renderable graph node."""
    key: str
    node_id: str
    cluster_id: str
    x: float
    y: float
    width: float
    height: float
    color: str
    shape: str
    label: str
    entity_type: str
    target_side: str
    source_side: str


@dataclass(frozen=True)
class GraphEdgeView:
    """Renderable graph edge."""
    edge_id: str
    source_key: str
    target_key: str
    color: str
    thickness: float
    arrow: str
    label: Optional[str]
    is_back_edge: bool


@dataclass(frozen=True)
class NetworkGraphView:
    """
    Pre-layouted network graph.
    Layout is stable: same result, same view.
    """
    view_id: str
    nodes: Tuple[GraphNodeView, ...]
    edges: Tuple[GraphEdgeView, ...]
    availability: AvailabilityState
    width: float
    height: float


def map_node(node: PositionedNode) -> GraphNodeView:
    kind = node.kind
    style = style_for(kind)
    return GraphNodeView(
        key=node_key(node.cluster_id, node.id),
        node_id=node.id,
        cluster_id=node.cluster_id,
        x=node.x,
        y=node.y,
        width=node.width,
        height=node.height,
        color=style.color,
        shape=style.shape,
        label=display_label(kind, node.node.label),
        entity_type=kind.value,
        target_side=node.target_side.value,
        source_side=node.source_side.value,
    )


def map_edge(edge: PositionedEdge) -> GraphEdgeView:
    style = BACK_EDGE_STYLE if edge.is_back_edge else DEFAULT_EDGE_STYLE
    return GraphEdgeView(
        edge_id=edge.id,
        source_key=node_key(edge.cluster_id, edge.edge.source),
        target_key=node_key(edge.cluster_id, edge.edge.target),
        color=style.color,
        thickness=style.width,
        arrow=style.arrow,
        label=edge.label or None,
        is_back_edge=edge.is_back_edge,
    )


def map_layout_to_view(result: LayoutResult, view_id: str = "graph") -> NetworkGraphView:
    """Map a layout pass; canvas extent is the union of cluster boxes."""
    nodes = tuple(map_node(n) for n in result.nodes)
    edges = tuple(map_edge(e) for e in result.edges)

    width = max((c.bounds[2] for c in result.clusters), default=0.0)
    height = max((c.bounds[3] for c in result.clusters), default=0.0)

    return NetworkGraphView(
        view_id=view_id,
        nodes=nodes,
        edges=edges,
        availability=AvailabilityState.PRESENT if nodes else AvailabilityState.MISSING,
        width=width,
        height=height,
    )
