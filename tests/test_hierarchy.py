"""
Hierarchical Layout Engine Tests
================================

Covers rank assignment, the cycle guard, barycenter ordering,
adaptive spacing and the local coordinate frame.
"""

import pytest

from graphlayout.contracts.base import Edge, Node
from graphlayout.contracts.layout import (
    AttachmentSide, Cluster, LayoutConfig, RankDirection,
)
from graphlayout.core.hierarchy import (
    HierarchicalLayoutEngine, assign_ranks, build_graph, find_back_edges,
)


def make_cluster(anchor: str, node_ids, pairs) -> Cluster:
    nodes = tuple(Node(id=n, label=n, type="person") for n in node_ids)
    edges = tuple(
        Edge(id=f"r{i}", source=s, target=t, label="rel")
        for i, (s, t) in enumerate(pairs)
    )
    return Cluster(anchor_id=anchor, nodes=nodes, edges=edges)


def by_id(cluster_layout):
    return {n.id: n for n in cluster_layout.nodes}


class TestRanks:

    def test_chain_ranks(self):
        cluster = make_cluster("a", ["a", "b", "c"], [("a", "b"), ("b", "c")])
        ranks = assign_ranks(build_graph(cluster))
        assert ranks == {"a": 0, "b": 1, "c": 2}

    def test_longest_path_wins(self):
        """A node reachable by a short and a long path sits below the long one."""
        cluster = make_cluster(
            "a", ["a", "b", "c", "d"],
            [("a", "d"), ("a", "b"), ("b", "c"), ("c", "d")]
        )
        ranks = assign_ranks(build_graph(cluster))
        assert ranks["d"] == 3

    def test_cycle_terminates_with_distinct_ranks(self):
        """a -> b -> c -> a completes and the back-edge is c -> a."""
        cluster = make_cluster("a", ["a", "b", "c"], [("a", "b"), ("b", "c"), ("c", "a")])
        graph = build_graph(cluster)

        back_edges = find_back_edges(graph)
        ranks = assign_ranks(graph, back_edges)

        assert back_edges == {("c", "a")}
        assert ranks == {"a": 0, "b": 1, "c": 2}

    def test_self_loop_is_back_edge(self):
        cluster = make_cluster("a", ["a"], [("a", "a")])
        graph = build_graph(cluster)
        assert find_back_edges(graph) == {("a", "a")}
        assert assign_ranks(graph) == {"a": 0}

    def test_source_nodes_are_traversed_first(self):
        """With an entry node outside the cycle, the cycle is cut below it."""
        cluster = make_cluster(
            "x", ["b", "c", "x"],
            [("b", "c"), ("c", "b"), ("x", "b")]
        )
        graph = build_graph(cluster)
        ranks = assign_ranks(graph, find_back_edges(graph))
        assert ranks == {"x": 0, "b": 1, "c": 2}


class TestLayoutCluster:

    @pytest.fixture
    def engine(self):
        return HierarchicalLayoutEngine(LayoutConfig())

    def test_empty_cluster(self, engine):
        result = engine.layout_cluster(Cluster(anchor_id="a", nodes=(), edges=()))
        assert result.is_empty
        assert result.width == 0.0
        assert result.rank_count == 0

    def test_two_node_coordinates(self, engine):
        """Top-left origin, rank pitch = node height + rank gap."""
        cluster = make_cluster("p1", ["p1", "e1"], [("p1", "e1")])
        result = engine.layout_cluster(cluster)
        nodes = by_id(result)

        assert (nodes["p1"].x, nodes["p1"].y) == (0.0, 0.0)
        assert (nodes["e1"].x, nodes["e1"].y) == (0.0, 170.0)
        assert result.width == 180.0
        assert result.height == 220.0
        assert result.max_rank_width == 1

    def test_attachment_sides_top_down(self, engine):
        cluster = make_cluster("p1", ["p1", "e1"], [("p1", "e1")])
        result = engine.layout_cluster(cluster)
        for positioned in result.nodes:
            assert positioned.target_side == AttachmentSide.TOP
            assert positioned.source_side == AttachmentSide.BOTTOM
        assert result.edges[0].source_side == AttachmentSide.BOTTOM

    def test_rows_are_centred(self, engine):
        """A single parent sits centred above its two children."""
        cluster = make_cluster("r", ["r", "a", "b"], [("r", "a"), ("r", "b")])
        nodes = by_id(engine.layout_cluster(cluster))

        assert nodes["a"].x == 0.0
        assert nodes["b"].x == 280.0
        assert nodes["r"].x == 140.0
        assert nodes["r"].center[0] == (nodes["a"].center[0] + nodes["b"].center[0]) / 2

    def test_barycenter_removes_crossing(self, engine):
        """r -> a, r -> b, a -> y, b -> x: y moves under a, x under b."""
        cluster = make_cluster(
            "r", ["r", "a", "b", "x", "y"],
            [("r", "a"), ("r", "b"), ("a", "y"), ("b", "x")]
        )
        nodes = by_id(engine.layout_cluster(cluster))

        assert nodes["a"].x < nodes["b"].x
        assert nodes["y"].x < nodes["x"].x
        assert (nodes["y"].order, nodes["x"].order) == (0, 1)

    def test_no_ordering_passes_keeps_first_seen_order(self):
        engine = HierarchicalLayoutEngine(LayoutConfig(ordering_passes=0))
        cluster = make_cluster(
            "r", ["r", "a", "b", "x", "y"],
            [("r", "a"), ("r", "b"), ("a", "y"), ("b", "x")]
        )
        nodes = by_id(engine.layout_cluster(cluster))
        assert nodes["x"].x < nodes["y"].x

    def test_adaptive_rank_gap(self, engine):
        """Twenty nodes: rank gap grows to 20 * 10 = 200."""
        leaves = [f"n{i}" for i in range(19)]
        cluster = make_cluster("hub", ["hub"] + leaves, [("hub", n) for n in leaves])
        nodes = by_id(engine.layout_cluster(cluster))

        assert nodes["n0"].y == 50.0 + 200.0

    def test_same_rank_nodes_do_not_overlap(self, engine):
        leaves = [f"n{i}" for i in range(6)]
        cluster = make_cluster("hub", ["hub"] + leaves, [("hub", n) for n in leaves])
        result = engine.layout_cluster(cluster)

        xs = sorted(n.x for n in result.nodes if n.rank == 1)
        for left, right in zip(xs, xs[1:]):
            assert right - left >= 180.0 + 100.0

    def test_cycle_edges_reported(self, engine):
        cluster = make_cluster("a", ["a", "b", "c"], [("a", "b"), ("b", "c"), ("c", "a")])
        result = engine.layout_cluster(cluster)

        assert [e.id for e in result.cycle_edges] == ["r2"]
        assert [e.is_back_edge for e in result.edges] == [False, False, True]
        assert sorted(n.rank for n in result.nodes) == [0, 1, 2]

    def test_left_right_direction(self):
        engine = HierarchicalLayoutEngine(LayoutConfig(rank_direction=RankDirection.LEFT_RIGHT))
        cluster = make_cluster("p1", ["p1", "e1"], [("p1", "e1")])
        result = engine.layout_cluster(cluster)
        nodes = by_id(result)

        assert (nodes["p1"].x, nodes["p1"].y) == (0.0, 0.0)
        assert (nodes["e1"].x, nodes["e1"].y) == (300.0, 0.0)
        assert nodes["e1"].target_side == AttachmentSide.LEFT
        assert nodes["e1"].source_side == AttachmentSide.RIGHT
        assert (result.width, result.height) == (480.0, 50.0)

    def test_layout_is_deterministic(self, engine):
        cluster = make_cluster(
            "r", ["r", "a", "b", "c", "x", "y"],
            [("r", "a"), ("r", "b"), ("r", "c"), ("a", "y"), ("c", "x"), ("b", "x")]
        )
        assert engine.layout_cluster(cluster) == engine.layout_cluster(cluster)
