"""
Graph Layout Engine

Deterministic layered layout for directed entity-relationship graphs.

LAYER FLOW:
===========
1. Ingestion: JSON document -> GraphDocument
2. Partition: edges grouped by anchor -> Clusters
3. Layout: Cluster -> local ClusterLayout
4. Compose: ClusterLayouts -> one global LayoutResult
"""

from .contracts import (
    Node, Edge, GraphDocument, NodeKind,
    LayoutConfig, RankDirection, AttachmentSide,
    Cluster, PositionedNode, PositionedEdge, ClusterLayout, ClusterPlacement,
    LayoutResult, LayoutIssue, IssueCode,
    ConfigError, IntegrityError, CycleWarning,
    by_source, by_target,
)
from .engine import GraphLayoutPipeline, layout
from .observability import LayoutDiagnostics

__version__ = "0.1.0"

__all__ = [
    'Node', 'Edge', 'GraphDocument', 'NodeKind',
    'LayoutConfig', 'RankDirection', 'AttachmentSide',
    'Cluster', 'PositionedNode', 'PositionedEdge', 'ClusterLayout', 'ClusterPlacement',
    'LayoutResult', 'LayoutIssue', 'IssueCode',
    'ConfigError', 'IntegrityError', 'CycleWarning',
    'by_source', 'by_target',
    'GraphLayoutPipeline', 'layout', 'LayoutDiagnostics',
]
