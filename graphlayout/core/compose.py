"""
Canvas Composer
===============

Places locally laid-out clusters on one shared canvas.

The offsets are threaded through an explicit fold over the clusters in
partitioner order; nothing is kept between calls.

NON-OVERLAP:
============
The horizontal advance is the node-count estimate
`cluster_gap_base + node_count * cluster_gap_per_node`, widened to the
cluster's real width plus a node gap whenever the estimate would fall
short. Offsets only grow, so cluster boxes never intersect.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import reduce
from typing import Optional, Sequence, Tuple

from ..contracts.layout import (
    ClusterLayout, ClusterPlacement, LayoutConfig, PositionedEdge, PositionedNode,
)


@dataclass(frozen=True)
class CanvasState:
    """Fold accumulator."""
    offset_x: float = 0.0
    offset_y: float = 0.0
    nodes: Tuple[PositionedNode, ...] = ()
    edges: Tuple[PositionedEdge, ...] = ()
    placements: Tuple[ClusterPlacement, ...] = ()


class CanvasComposer:
    """Merges cluster layouts into global node/edge lists."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self._config = config or LayoutConfig()

    def compose(self, layouts: Sequence[ClusterLayout]) -> CanvasState:
        return reduce(self.place, layouts, CanvasState())

    def place(self, state: CanvasState, layout: ClusterLayout) -> CanvasState:
        """Translate one cluster by the running offsets and advance them."""
        if layout.is_empty:
            return state

        placement = ClusterPlacement(
            anchor_id=layout.anchor_id,
            index=len(state.placements),
            offset_x=state.offset_x,
            offset_y=state.offset_y,
            width=layout.width,
            height=layout.height,
            node_count=layout.node_count,
        )
        moved = tuple(
            node.translated(state.offset_x, state.offset_y) for node in layout.nodes
        )

        return CanvasState(
            offset_x=state.offset_x + self.horizontal_advance(layout),
            offset_y=state.offset_y + self._config.cluster_vertical_stride,
            nodes=state.nodes + moved,
            edges=state.edges + layout.edges,
            placements=state.placements + (placement,),
        )

    def horizontal_advance(self, layout: ClusterLayout) -> float:
        cfg = self._config
        estimate = cfg.cluster_gap_base + layout.node_count * cfg.cluster_gap_per_node
        return max(estimate, layout.width + cfg.node_gap)
