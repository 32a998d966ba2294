"""
Graph View Layer

Responsibility:
Turn layout results into render-ready views and own the load lifecycle
of a consuming view.

PRINCIPLES:
1. Immutable (Frozen) views
2. No layout logic
3. No drawing logic
"""

from .styles import NodeStyle, EdgeStyle, NODE_STYLES, style_for, icon_for, display_label
from .views import (
    AvailabilityState, GraphNodeView, GraphEdgeView, NetworkGraphView,
    map_layout_to_view, node_key,
)
from .viewmodel import GraphViewModel, LoadOutcome, OutcomeStatus, ViewPhase

__all__ = [
    'NodeStyle', 'EdgeStyle', 'NODE_STYLES', 'style_for', 'icon_for', 'display_label',
    'AvailabilityState', 'GraphNodeView', 'GraphEdgeView', 'NetworkGraphView',
    'map_layout_to_view', 'node_key',
    'GraphViewModel', 'LoadOutcome', 'OutcomeStatus', 'ViewPhase',
]
