"""
Canvas Composer Tests
=====================

Verifies the offset fold: translation, monotonic advance, non-overlap.
"""

import pytest

from graphlayout.contracts.base import Edge, Node
from graphlayout.contracts.layout import Cluster, ClusterLayout, LayoutConfig
from graphlayout.core.compose import CanvasComposer, CanvasState
from graphlayout.core.hierarchy import HierarchicalLayoutEngine


def chain_cluster(anchor: str, length: int) -> Cluster:
    ids = [anchor] + [f"{anchor}_{i}" for i in range(1, length)]
    nodes = tuple(Node(id=n, label=n) for n in ids)
    edges = tuple(
        Edge(id=f"{anchor}_r{i}", source=anchor, target=t)
        for i, t in enumerate(ids[1:])
    )
    return Cluster(anchor_id=anchor, nodes=nodes, edges=edges)


@pytest.fixture
def config():
    return LayoutConfig()


@pytest.fixture
def layouts(config):
    engine = HierarchicalLayoutEngine(config)
    return [engine.layout_cluster(chain_cluster(a, n)) for a, n in (("a", 2), ("b", 3), ("c", 2))]


class TestCanvasComposer:

    def test_first_cluster_at_origin(self, config, layouts):
        state = CanvasComposer(config).compose(layouts)
        first = state.placements[0]
        assert (first.offset_x, first.offset_y) == (0.0, 0.0)

    def test_offsets_follow_fold(self, config, layouts):
        """offset_x advances by base + count * per-node; offset_y by the stride."""
        state = CanvasComposer(config).compose(layouts)
        offsets = [(p.offset_x, p.offset_y) for p in state.placements]

        # a: 2 nodes -> 300 + 120; b: 3 nodes but 460 wide -> max(480, 560)
        assert offsets == [(0.0, 0.0), (420.0, 40.0), (980.0, 80.0)]
        assert (state.offset_x, state.offset_y) == (980.0 + 420.0, 120.0)

    def test_nodes_translated(self, config, layouts):
        state = CanvasComposer(config).compose(layouts)
        b_nodes = [n for n in state.nodes if n.cluster_id == "b"]
        local = {n.id: n for n in layouts[1].nodes}

        for positioned in b_nodes:
            assert positioned.x == local[positioned.id].x + 420.0
            assert positioned.y == local[positioned.id].y + 40.0

    def test_boxes_do_not_intersect(self, config, layouts):
        placements = CanvasComposer(config).compose(layouts).placements
        for i, left in enumerate(placements):
            for right in placements[i + 1:]:
                assert not left.intersects(right)

    def test_wide_cluster_widens_advance(self):
        """The node-count estimate never undercuts the real width."""
        config = LayoutConfig(cluster_gap_base=0.0, cluster_gap_per_node=1.0)
        wide = HierarchicalLayoutEngine(config).layout_cluster(chain_cluster("w", 6))

        assert CanvasComposer(config).horizontal_advance(wide) == wide.width + config.node_gap

    def test_empty_layout_skipped(self, config):
        empty = ClusterLayout(
            anchor_id="x", nodes=(), edges=(), width=0.0, height=0.0,
            rank_count=0, max_rank_width=0,
        )
        assert CanvasComposer(config).compose([empty]) == CanvasState()

    def test_edges_kept_in_cluster_order(self, config, layouts):
        state = CanvasComposer(config).compose(layouts)
        assert [e.cluster_id for e in state.edges] == ["a", "b", "b", "c"]
