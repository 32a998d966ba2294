"""
API Mapper
==========

Transforms a LayoutResult into plain JSON-ready dicts.
Used by the HTTP API and the CLI; ordering of the result is preserved.
"""
from typing import Any, Dict

from ..contracts.base import LayoutIssue
from ..contracts.layout import (
    ClusterPlacement, LayoutResult, PositionedEdge, PositionedNode,
)


def map_result_to_dto(result: LayoutResult) -> Dict[str, Any]:
    """Map a complete layout pass."""
    return {
        "nodes": [_map_node(n) for n in result.nodes],
        "edges": [_map_edge(e) for e in result.edges],
        "clusters": [_map_cluster(c) for c in result.clusters],
        "issues": [_map_issue(i) for i in result.issues],
    }


def _map_node(node: PositionedNode) -> Dict[str, Any]:
    return {
        "id": node.id,
        "label": node.node.label,
        "type": node.node.type,
        "color_key": node.color_key,
        "cluster_id": node.cluster_id,
        "x": node.x,
        "y": node.y,
        "width": node.width,
        "height": node.height,
        "rank": node.rank,
        "order": node.order,
        "target_side": node.target_side.value,
        "source_side": node.source_side.value,
    }


def _map_edge(edge: PositionedEdge) -> Dict[str, Any]:
    return {
        "id": edge.id,
        "source": edge.edge.source,
        "target": edge.edge.target,
        "label": edge.label,
        "cluster_id": edge.cluster_id,
        "source_side": edge.source_side.value,
        "target_side": edge.target_side.value,
        "is_back_edge": edge.is_back_edge,
    }


def _map_cluster(cluster: ClusterPlacement) -> Dict[str, Any]:
    return {
        "anchor_id": cluster.anchor_id,
        "index": cluster.index,
        "offset_x": cluster.offset_x,
        "offset_y": cluster.offset_y,
        "width": cluster.width,
        "height": cluster.height,
        "node_count": cluster.node_count,
    }


def _map_issue(issue: LayoutIssue) -> Dict[str, Any]:
    return {
        "code": issue.code.name,
        "message": issue.message,
        "subject_id": issue.subject_id,
        "context": dict(issue.context),
    }
