"""
Layout Pipeline Orchestration

Coordinates the stages of one layout pass:

1. Integrity: drop dangling/duplicate edges and duplicate nodes
2. Partition: group edges into clusters by anchor
3. Layout: place each cluster in its local frame
4. Compose: translate clusters onto the shared canvas

DESIGN PRINCIPLES:
==================
1. Stages communicate only through contracts
2. A pass never mutates its inputs; the result replaces the old one whole
3. Non-fatal conditions become LayoutIssues, never silent drops
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Set, Tuple
import logging
import warnings

from .contracts.base import (
    CycleWarning, Edge, GraphDocument, IntegrityError, IssueCode, LayoutIssue, Node,
)
from .contracts.layout import LayoutConfig, LayoutResult
from .core.compose import CanvasComposer
from .core.hierarchy import HierarchicalLayoutEngine
from .core.partition import ClusterPartitioner
from .observability import LayoutDiagnostics

logger = logging.getLogger(__name__)


class GraphLayoutPipeline:
    """
    Unified entry point for the layout engine.

    STAGE FLOW:
    ===========
    nodes, edges -> integrity check -> partition -> per-cluster layout
    -> canvas composition -> LayoutResult
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        diagnostics: Optional[LayoutDiagnostics] = None
    ):
        self._config = config or LayoutConfig()
        self._diagnostics = diagnostics
        self._partitioner = ClusterPartitioner(self._config.partition_key)
        self._engine = HierarchicalLayoutEngine(self._config)
        self._composer = CanvasComposer(self._config)

    @property
    def config(self) -> LayoutConfig:
        return self._config

    def run(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> LayoutResult:
        issues: List[LayoutIssue] = []

        nodes, edges = self._check_integrity(nodes, edges, issues)

        for orphan in ClusterPartitioner.orphans(nodes, edges):
            issues.append(LayoutIssue(
                code=IssueCode.ORPHAN_NODE,
                message=f"Node {orphan.id} is referenced by no edge and is not laid out",
                subject_id=orphan.id,
            ))

        clusters = self._partitioner.partition(nodes, edges)
        layouts = [self._engine.layout_cluster(c) for c in clusters.values()]

        for cluster_layout in layouts:
            for edge in cluster_layout.cycle_edges:
                issue = LayoutIssue(
                    code=IssueCode.CYCLE_DETECTED,
                    message=(
                        f"Edge {edge.id} ({edge.source} -> {edge.target}) closes a cycle "
                        f"in cluster {cluster_layout.anchor_id}; ranked as a back-edge"
                    ),
                    subject_id=edge.id,
                ).with_context("cluster", cluster_layout.anchor_id)
                issues.append(issue)
                warnings.warn(issue.message, CycleWarning, stacklevel=3)

        canvas = self._composer.compose(layouts)

        result = LayoutResult(
            nodes=canvas.nodes,
            edges=canvas.edges,
            clusters=canvas.placements,
            issues=tuple(issues),
        )
        self._record(result)

        logger.info(
            "layout complete: %d clusters, %d nodes, %d edges, %d issues",
            len(result.clusters), len(result.nodes), len(result.edges), len(result.issues)
        )
        return result

    def run_document(self, document: GraphDocument) -> LayoutResult:
        return self.run(document.nodes, document.edges)

    # =========================================================================
    # INTEGRITY
    # =========================================================================

    def _check_integrity(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        issues: List[LayoutIssue]
    ) -> Tuple[Tuple[Node, ...], Tuple[Edge, ...]]:
        """
        Keep the first node per id and the first edge per id; drop edges
        whose endpoints do not exist.

        Strict mode raises on the first integrity issue instead.
        """
        kept_nodes: List[Node] = []
        node_ids: Set[str] = set()
        for node in nodes:
            if node.id in node_ids:
                self._integrity_issue(issues, LayoutIssue(
                    code=IssueCode.DUPLICATE_NODE,
                    message=f"Duplicate node id {node.id}; keeping first occurrence",
                    subject_id=node.id,
                ))
                continue
            node_ids.add(node.id)
            kept_nodes.append(node)

        kept_edges: List[Edge] = []
        edge_ids: Set[str] = set()
        for edge in edges:
            if edge.id in edge_ids:
                self._integrity_issue(issues, LayoutIssue(
                    code=IssueCode.DUPLICATE_EDGE,
                    message=f"Duplicate edge id {edge.id}; keeping first occurrence",
                    subject_id=edge.id,
                ))
                continue
            edge_ids.add(edge.id)
            missing = [e for e in (edge.source, edge.target) if e not in node_ids]
            if missing:
                self._integrity_issue(issues, LayoutIssue(
                    code=IssueCode.DANGLING_EDGE,
                    message=f"Edge {edge.id} references missing node(s) {', '.join(missing)}; dropped",
                    subject_id=edge.id,
                ).with_context("missing", ",".join(missing)))
                continue
            kept_edges.append(edge)

        return tuple(kept_nodes), tuple(kept_edges)

    def _integrity_issue(self, issues: List[LayoutIssue], issue: LayoutIssue):
        if self._config.strict_integrity:
            if self._diagnostics is not None:
                self._diagnostics.record_issue(issue)
            raise IntegrityError(issue)
        issues.append(issue)

    def _record(self, result: LayoutResult):
        if self._diagnostics is None:
            return
        for issue in result.issues:
            self._diagnostics.record_issue(issue)
        self._diagnostics.increment("layouts_total")
        self._diagnostics.increment("clusters_total", len(result.clusters))
        self._diagnostics.increment("nodes_positioned", len(result.nodes))


def layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    config: Optional[LayoutConfig] = None,
    diagnostics: Optional[LayoutDiagnostics] = None
) -> LayoutResult:
    """
    Lay out a graph.

    Pure with respect to its inputs: the same nodes, edges and config give
    an identical result. Unpacks as `(nodes, edges)`.
    """
    return GraphLayoutPipeline(config, diagnostics).run(nodes, edges)
