"""
Cluster Partitioner
===================

Groups edges by an anchor key and gathers the nodes they reference.

PARTITION RULES:
================
- Anchor order is first-seen edge order (never re-sorted)
- A cluster's nodes are the endpoints of its edges, in canonical node order
- Nodes referenced by no edge belong to no cluster
- A node referenced under several anchors appears in each of those clusters
"""

from __future__ import annotations
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from ..contracts.base import Edge, Node
from ..contracts.layout import Cluster, by_source


class ClusterPartitioner:
    """Splits a graph into independently laid-out clusters."""

    def __init__(self, partition_key: Optional[Callable[[Edge], str]] = None):
        self._key = partition_key or by_source

    def partition(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge]
    ) -> Dict[str, Cluster]:
        """
        Build anchor -> Cluster mapping.

        Dict insertion order is the cluster placement order.
        """
        grouped: Dict[str, List[Edge]] = {}
        for edge in edges:
            grouped.setdefault(self._key(edge), []).append(edge)

        clusters: Dict[str, Cluster] = {}
        for anchor_id, anchor_edges in grouped.items():
            referenced: Set[str] = set()
            for edge in anchor_edges:
                referenced.add(edge.source)
                referenced.add(edge.target)

            clusters[anchor_id] = Cluster(
                anchor_id=anchor_id,
                nodes=tuple(n for n in nodes if n.id in referenced),
                edges=tuple(anchor_edges),
            )

        return clusters

    @staticmethod
    def orphans(nodes: Sequence[Node], edges: Sequence[Edge]) -> Tuple[Node, ...]:
        """Nodes not referenced by any edge (invisible to layout)."""
        referenced: Set[str] = set()
        for edge in edges:
            referenced.add(edge.source)
            referenced.add(edge.target)
        return tuple(n for n in nodes if n.id not in referenced)
