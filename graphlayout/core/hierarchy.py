"""
Hierarchical Layout Engine
==========================

Layered (Sugiyama-style) placement of a single cluster.

PIPELINE:
=========
1. Build a directed graph from the cluster
2. Find back-edges with an explicit-state depth-first traversal
3. Rank = longest path from a source node in the back-edge-free graph
4. Reorder each rank by the barycenter of its neighbours
5. Assign coordinates; the local frame starts at (0, 0) top-left

TERMINATION:
============
The traversal marks every node VISITING before descending and DONE after,
so each node is expanded exactly once. Edges into a VISITING node are
back-edges and are excluded from ranking, which leaves a DAG.
"""

from __future__ import annotations
from typing import Callable, Dict, List, Optional, Set, Tuple
import logging

import networkx as nx

from ..contracts.layout import (
    ATTACHMENT_SIDES, Cluster, ClusterLayout, LayoutConfig,
    PositionedEdge, PositionedNode, RankDirection,
)

logger = logging.getLogger(__name__)

_UNVISITED = 0
_VISITING = 1
_DONE = 2


def build_graph(cluster: Cluster) -> nx.DiGraph:
    """Directed graph over the cluster; insertion order is first-seen order."""
    graph = nx.DiGraph()
    for node in cluster.nodes:
        graph.add_node(node.id)
    for edge in cluster.edges:
        if edge.source in graph and edge.target in graph:
            graph.add_edge(edge.source, edge.target)
    return graph


def find_back_edges(graph: nx.DiGraph) -> Set[Tuple[str, str]]:
    """
    Edges that close a cycle during a depth-first traversal.

    Roots are the in-degree-0 nodes first, then any node still unvisited,
    both in insertion order. Self-loops are always back-edges.
    """
    state = {node: _UNVISITED for node in graph}
    back_edges: Set[Tuple[str, str]] = set()

    roots = [n for n in graph if graph.in_degree(n) == 0] + list(graph)

    for root in roots:
        if state[root] != _UNVISITED:
            continue
        state[root] = _VISITING
        stack = [(root, iter(graph.successors(root)))]

        while stack:
            node, children = stack[-1]
            child = next(children, None)
            if child is None:
                state[node] = _DONE
                stack.pop()
                continue
            if state[child] == _VISITING:
                back_edges.add((node, child))
            elif state[child] == _UNVISITED:
                state[child] = _VISITING
                stack.append((child, iter(graph.successors(child))))

    return back_edges


def assign_ranks(
    graph: nx.DiGraph,
    back_edges: Optional[Set[Tuple[str, str]]] = None
) -> Dict[str, int]:
    """
    Longest-path rank of every node.

    Back-edges are ignored; ties in the topological order are broken
    by first-seen order.
    """
    if back_edges is None:
        back_edges = find_back_edges(graph)

    dag = nx.DiGraph()
    dag.add_nodes_from(graph)
    dag.add_edges_from(e for e in graph.edges if e not in back_edges)

    position = {node: i for i, node in enumerate(graph)}
    ranks: Dict[str, int] = {}
    for node in nx.lexicographical_topological_sort(dag, key=position.__getitem__):
        ranks[node] = max(
            (ranks[p] + 1 for p in dag.predecessors(node)),
            default=0
        )
    return ranks


class HierarchicalLayoutEngine:
    """
    Computes local coordinates for one cluster.

    Stateless between calls: the same cluster and config always produce
    the same layout.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self._config = config or LayoutConfig()

    @property
    def config(self) -> LayoutConfig:
        return self._config

    def layout_cluster(self, cluster: Cluster) -> ClusterLayout:
        if not cluster.nodes:
            return ClusterLayout(
                anchor_id=cluster.anchor_id,
                nodes=(),
                edges=(),
                width=0.0,
                height=0.0,
                rank_count=0,
                max_rank_width=0,
            )

        graph = build_graph(cluster)
        back_edges = find_back_edges(graph)
        ranks = assign_ranks(graph, back_edges)
        layers = self._group_layers(graph, ranks)
        layers = self._reduce_crossings(graph, ranks, layers)

        cfg = self._config
        horizontal = cfg.rank_direction == RankDirection.TOP_BOTTOM
        cross_extent = cfg.node_width if horizontal else cfg.node_height
        rank_extent = cfg.node_height if horizontal else cfg.node_width
        rank_gap = cfg.rank_gap(cluster.node_count)
        rank_pitch = rank_extent + rank_gap
        widest = max(len(layer) for layer in layers)
        target_side, source_side = ATTACHMENT_SIDES[cfg.rank_direction]

        by_id = {node.id: node for node in cluster.nodes}
        positioned: List[PositionedNode] = []

        for rank, layer in enumerate(layers):
            centers = self._slot_centers(len(layer), widest, cross_extent)
            along = rank * rank_pitch + rank_extent / 2
            for slot, node_id in enumerate(layer):
                cross = centers[slot]
                cx, cy = (cross, along) if horizontal else (along, cross)
                positioned.append(PositionedNode(
                    node=by_id[node_id],
                    x=cx - cfg.node_width / 2,
                    y=cy - cfg.node_height / 2,
                    width=cfg.node_width,
                    height=cfg.node_height,
                    rank=rank,
                    order=slot,
                    cluster_id=cluster.anchor_id,
                    target_side=target_side,
                    source_side=source_side,
                ))

        edges = tuple(
            PositionedEdge(
                edge=edge,
                cluster_id=cluster.anchor_id,
                source_side=source_side,
                target_side=target_side,
                is_back_edge=(edge.source, edge.target) in back_edges,
            )
            for edge in cluster.edges
        )
        cycle_edges = tuple(e.edge for e in edges if e.is_back_edge)

        cross_span = self._span(widest, cross_extent)
        rank_span = len(layers) * rank_extent + (len(layers) - 1) * rank_gap

        logger.debug(
            "cluster %s: %d nodes in %d ranks, %d back-edges",
            cluster.anchor_id, len(positioned), len(layers), len(cycle_edges)
        )

        return ClusterLayout(
            anchor_id=cluster.anchor_id,
            nodes=tuple(positioned),
            edges=edges,
            width=cross_span if horizontal else rank_span,
            height=rank_span if horizontal else cross_span,
            rank_count=len(layers),
            max_rank_width=widest,
            cycle_edges=cycle_edges,
        )

    # =========================================================================
    # ORDERING
    # =========================================================================

    @staticmethod
    def _group_layers(graph: nx.DiGraph, ranks: Dict[str, int]) -> List[List[str]]:
        layers: List[List[str]] = [[] for _ in range(max(ranks.values()) + 1)]
        for node in graph:
            layers[ranks[node]].append(node)
        return layers

    def _reduce_crossings(
        self,
        graph: nx.DiGraph,
        ranks: Dict[str, int],
        layers: List[List[str]]
    ) -> List[List[str]]:
        """Barycenter sweeps: down over earlier ranks, then up over later ones."""
        if len(layers) < 2:
            return layers

        neighbours = {node: _neighbours(graph, node) for node in graph}
        cross_extent = (
            self._config.node_width
            if self._config.rank_direction == RankDirection.TOP_BOTTOM
            else self._config.node_height
        )
        widest = max(len(layer) for layer in layers)
        positions: Dict[str, float] = {}
        for layer in layers:
            self._place(layer, widest, cross_extent, positions)

        for _ in range(self._config.ordering_passes):
            for rank in range(1, len(layers)):
                layers[rank] = self._sort_by_barycenter(
                    layers[rank], positions,
                    lambda n, r=rank: [m for m in neighbours[n] if ranks[m] < r]
                )
                self._place(layers[rank], widest, cross_extent, positions)

            for rank in range(len(layers) - 2, -1, -1):
                layers[rank] = self._sort_by_barycenter(
                    layers[rank], positions,
                    lambda n, r=rank: [m for m in neighbours[n] if ranks[m] > r]
                )
                self._place(layers[rank], widest, cross_extent, positions)

        return layers

    @staticmethod
    def _sort_by_barycenter(
        layer: List[str],
        positions: Dict[str, float],
        reference: Callable[[str], List[str]]
    ) -> List[str]:
        keyed = []
        for slot, node in enumerate(layer):
            refs = reference(node)
            if refs:
                barycenter = sum(positions[m] for m in refs) / len(refs)
            else:
                barycenter = positions[node]
            keyed.append((barycenter, slot, node))
        keyed.sort()
        return [node for _, _, node in keyed]

    # =========================================================================
    # GEOMETRY
    # =========================================================================

    def _span(self, count: int, extent: float) -> float:
        if count == 0:
            return 0.0
        return count * extent + (count - 1) * self._config.node_gap

    def _slot_centers(self, count: int, widest: int, extent: float) -> List[float]:
        """Centres of `count` slots, centred against the widest rank."""
        start = (self._span(widest, extent) - self._span(count, extent)) / 2
        pitch = extent + self._config.node_gap
        return [start + i * pitch + extent / 2 for i in range(count)]

    def _place(
        self,
        layer: List[str],
        widest: int,
        extent: float,
        positions: Dict[str, float]
    ) -> None:
        for node, center in zip(layer, self._slot_centers(len(layer), widest, extent)):
            positions[node] = center


def _neighbours(graph: nx.DiGraph, node: str) -> Tuple[str, ...]:
    """Predecessors then successors, deduplicated, insertion ordered."""
    ordered = list(graph.predecessors(node)) + list(graph.successors(node))
    return tuple(m for m in dict.fromkeys(ordered) if m != node)
