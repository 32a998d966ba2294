"""
Node Kind Styles

Presentation lookup for every NodeKind.

TOTAL MAPPING:
==============
NODE_STYLES has an entry for every NodeKind member, including UNKNOWN.
Raw type strings never index this table directly; they are resolved
through NodeKind.resolve first.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Final

from graphlayout.contracts.base import NodeKind


@dataclass(frozen=True)
class NodeStyle:
    color: str      # border colour
    icon: str       # emoji prefix, may be empty
    shape: str = "round-rectangle"


@dataclass(frozen=True)
class EdgeStyle:
    color: str
    width: float
    arrow: str = "triangle"


NODE_STYLES: Final[Dict[NodeKind, NodeStyle]] = {
    NodeKind.PERSON: NodeStyle(color="#60a5fa", icon="👤"),
    NodeKind.EMAIL: NodeStyle(color="#f59e0b", icon="✉️"),
    NodeKind.DOMAIN: NodeStyle(color="#22c55e", icon="🌐"),
    NodeKind.COMPANY: NodeStyle(color="#8b5cf6", icon="🏢"),
    NodeKind.SOCIAL: NodeStyle(color="#0ea5e9", icon=""),
    NodeKind.RISK: NodeStyle(color="#ef4444", icon="⚠️"),
    NodeKind.PROFILE: NodeStyle(color="#c084fc", icon="👤"),
    NodeKind.UNKNOWN: NodeStyle(color="#9ca3af", icon=""),
}

# Social handles get a network-specific icon when the label names one
SOCIAL_ICONS: Final[Dict[str, str]] = {
    "twitter": "🐦",
    "linkedin": "💼",
}

DEFAULT_EDGE_STYLE: Final[EdgeStyle] = EdgeStyle(color="#60a5fa", width=2.0)
BACK_EDGE_STYLE: Final[EdgeStyle] = EdgeStyle(color="#f87171", width=2.0)


def style_for(kind: NodeKind) -> NodeStyle:
    return NODE_STYLES[kind]


def icon_for(kind: NodeKind, label: str) -> str:
    if kind == NodeKind.SOCIAL:
        lower = label.lower()
        for network, icon in SOCIAL_ICONS.items():
            if network in lower:
                return icon
    return NODE_STYLES[kind].icon


def display_label(kind: NodeKind, label: str) -> str:
    """Label as drawn: icon prefix (when any) plus the raw label."""
    icon = icon_for(kind, label)
    return f"{icon} {label}" if icon else label
