"""Graph builder — aggregates gift events into a weighted directed graph.

Every gift contributes ``1 + 0.5 * tips`` to the edge keyed by its ordered
(sender, receiver) pair. A→B and B→A are different keys and never merge.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass, field

import networkx as nx

from gift_circulation.models import Gift, User

# Visual radius shared by every node (pixels).
NODE_RADIUS: float = 24.0
TIP_WEIGHT: float = 0.5


@dataclass(frozen=True)
class GraphNode:
    """A user that appears in at least one gift."""

    id: str
    name: str
    avatar: str
    color: str
    radius: float = NODE_RADIUS


@dataclass
class GraphEdge:
    """Aggregated edge for one ordered (source, target) pair."""

    source: str
    target: str
    weight: float


@dataclass
class GiftGraph:
    """Builder output: nodes and edges in first-occurrence order.

    Edges may reference ids that have no node (the gift named a user the
    store did not return). Consumers skip those edges.
    """

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def resolvable_edges(self) -> list[GraphEdge]:
        """Edges whose two endpoints both have a node."""
        ids = self.node_ids()
        return [e for e in self.edges if e.source in ids and e.target in ids]

    def to_digraph(self) -> nx.DiGraph:
        """Return the resolvable part of the graph as a networkx DiGraph.

        Node attribute ``data`` holds the GraphNode, edge attribute
        ``weight`` the aggregated weight.
        """
        g: nx.DiGraph = nx.DiGraph()
        for node in self.nodes:
            g.add_node(node.id, data=node)
        for edge in self.resolvable_edges():
            g.add_edge(edge.source, edge.target, weight=edge.weight)
        return g

    def fingerprint(self, width: float, height: float) -> str:
        """Content hash of the graph plus viewport size."""
        h = hashlib.sha256()
        # repr() quotes and escapes every field, so no separator can be forged.
        h.update(repr(("viewport", width, height)).encode())
        for n in self.nodes:
            h.update(repr(("node", n.id, n.radius, n.name, n.color, n.avatar)).encode())
        for e in self.edges:
            h.update(repr(("edge", e.source, e.target, e.weight)).encode())
        return h.hexdigest()


def gift_weight(gift: Gift) -> float:
    """Contribution of a single gift to its edge weight."""
    return 1 + TIP_WEIGHT * gift.tips


def build(users: Iterable[User], gifts: Iterable[Gift]) -> GiftGraph:
    """Aggregate ``gifts`` into a GiftGraph.

    Only users referenced by at least one gift become nodes, so an empty
    gift list yields an empty graph whatever ``users`` holds. A gift naming
    an unknown user id still produces its edge; no node is created for the
    missing id.
    """
    by_id: dict[str, User] = {u.id: u for u in users}

    weights: dict[tuple[str, str], float] = {}
    seen: dict[str, None] = {}  # ordered set of referenced ids
    for gift in gifts:
        key = (gift.sender_id, gift.receiver_id)
        if key in weights:
            weights[key] += gift_weight(gift)
        else:
            weights[key] = gift_weight(gift)
        seen.setdefault(gift.sender_id)
        seen.setdefault(gift.receiver_id)

    nodes: list[GraphNode] = []
    for user_id in seen:
        user = by_id.get(user_id)
        if user is None:
            continue
        nodes.append(GraphNode(id=user.id, name=user.name, avatar=user.avatar, color=user.color))

    edges = [GraphEdge(source=src, target=tgt, weight=w) for (src, tgt), w in weights.items()]
    return GiftGraph(nodes=nodes, edges=edges)
