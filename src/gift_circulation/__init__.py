"""gift_circulation — gift graph construction and force-directed layout."""

from gift_circulation.graph import GiftGraph, GraphEdge, GraphNode, build
from gift_circulation.layout import LayoutController, LayoutEngine, create_layout
from gift_circulation.models import Comment, Gift, User

__all__ = [
    "Comment",
    "Gift",
    "GiftGraph",
    "GraphEdge",
    "GraphNode",
    "LayoutController",
    "LayoutEngine",
    "User",
    "build",
    "create_layout",
]
