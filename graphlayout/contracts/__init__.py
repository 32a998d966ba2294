"""
Contracts shared by every layer of the layout pipeline.
"""

from .base import (
    IssueCode, LayoutIssue, ConfigError, IntegrityError, CycleWarning,
    NodeKind, Node, Edge, GraphDocument,
)
from .layout import (
    by_source, by_target, PARTITION_KEYS,
    RankDirection, AttachmentSide, ATTACHMENT_SIDES,
    LayoutConfig, Cluster, PositionedNode, PositionedEdge,
    ClusterLayout, ClusterPlacement, LayoutResult,
)

__all__ = [
    'IssueCode', 'LayoutIssue', 'ConfigError', 'IntegrityError', 'CycleWarning',
    'NodeKind', 'Node', 'Edge', 'GraphDocument',
    'by_source', 'by_target', 'PARTITION_KEYS',
    'RankDirection', 'AttachmentSide', 'ATTACHMENT_SIDES',
    'LayoutConfig', 'Cluster', 'PositionedNode', 'PositionedEdge',
    'ClusterLayout', 'ClusterPlacement', 'LayoutResult',
]
