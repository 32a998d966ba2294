"""
Layout core: partitioning, per-cluster placement, canvas composition.
"""

from .partition import ClusterPartitioner
from .hierarchy import (
    HierarchicalLayoutEngine, build_graph, find_back_edges, assign_ranks,
)
from .compose import CanvasComposer, CanvasState

__all__ = [
    'ClusterPartitioner',
    'HierarchicalLayoutEngine', 'build_graph', 'find_back_edges', 'assign_ranks',
    'CanvasComposer', 'CanvasState',
]
