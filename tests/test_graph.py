"""Tests for graph.py — gift aggregation into weighted directed edges."""

from __future__ import annotations

import networkx as nx

from gift_circulation.graph import NODE_RADIUS, GiftGraph, GraphEdge, GraphNode, build, gift_weight
from gift_circulation.models import Gift, User

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_user(user_id: str, name: str = "") -> User:
    return User(id=user_id, name=name or user_id.upper(), avatar=f"https://img/{user_id}", color="#123456")


def make_gift(gift_id: str, sender: str, receiver: str, tips: int = 0, ts: int = 0) -> Gift:
    return Gift(id=gift_id, sender_id=sender, receiver_id=receiver, item="thing", timestamp=ts, tips=tips)


USERS = [make_user("a"), make_user("b"), make_user("c"), make_user("lurker")]


def edge_map(graph: GiftGraph) -> dict[tuple[str, str], float]:
    return {(e.source, e.target): e.weight for e in graph.edges}


# ─── Empty Input ──────────────────────────────────────────────────────────────


class TestEmptyInput:
    def test_no_users_no_gifts(self):
        graph = build([], [])
        assert graph.nodes == []
        assert graph.edges == []

    def test_users_without_gifts(self):
        """Users only become nodes through gifts."""
        graph = build(USERS, [])
        assert graph.nodes == []
        assert graph.edges == []


# ─── Weights ──────────────────────────────────────────────────────────────────


class TestWeights:
    def test_single_gift_weight(self):
        assert gift_weight(make_gift("g", "a", "b")) == 1
        assert gift_weight(make_gift("g", "a", "b", tips=3)) == 2.5

    def test_tips_aggregate(self):
        """Tips {0, 2, 4} on A→B sum to (1+0) + (1+1) + (1+2) = 6."""
        gifts = [
            make_gift("g1", "a", "b", tips=0),
            make_gift("g2", "a", "b", tips=2),
            make_gift("g3", "a", "b", tips=4),
        ]
        graph = build(USERS, gifts)
        assert len(graph.edges) == 1
        assert graph.edges[0] == GraphEdge(source="a", target="b", weight=6)

    def test_weights_strictly_positive(self):
        gifts = [make_gift("g1", "a", "b"), make_gift("g2", "b", "c", tips=7)]
        assert all(e.weight > 0 for e in build(USERS, gifts).edges)


# ─── Direction ────────────────────────────────────────────────────────────────


class TestDirection:
    def test_reverse_direction_is_distinct_edge(self):
        gifts = [make_gift("g1", "a", "b", tips=2), make_gift("g2", "b", "a")]
        edges = edge_map(build(USERS, gifts))
        assert edges == {("a", "b"): 2.0, ("b", "a"): 1.0}

    def test_no_duplicate_keys(self):
        gifts = [make_gift(f"g{i}", "a", "b") for i in range(5)] + [make_gift("x", "b", "a")]
        graph = build(USERS, gifts)
        keys = [(e.source, e.target) for e in graph.edges]
        assert len(keys) == len(set(keys)) == 2


# ─── Nodes ────────────────────────────────────────────────────────────────────


class TestNodes:
    def test_every_endpoint_appears_once(self):
        gifts = [
            make_gift("g1", "a", "b"),
            make_gift("g2", "b", "c"),
            make_gift("g3", "c", "a"),
            make_gift("g4", "a", "b"),
        ]
        ids = [n.id for n in build(USERS, gifts).nodes]
        assert sorted(ids) == ["a", "b", "c"]
        assert "lurker" not in ids

    def test_first_occurrence_order(self):
        gifts = [make_gift("g1", "c", "a"), make_gift("g2", "b", "c")]
        graph = build(USERS, gifts)
        assert [n.id for n in graph.nodes] == ["c", "a", "b"]
        assert [(e.source, e.target) for e in graph.edges] == [("c", "a"), ("b", "c")]

    def test_node_carries_user_data_and_fixed_radius(self):
        graph = build([make_user("a", "Alice"), make_user("b")], [make_gift("g", "a", "b")])
        alice = graph.nodes[0]
        assert alice.name == "Alice"
        assert alice.avatar == "https://img/a"
        assert all(n.radius == NODE_RADIUS for n in graph.nodes)

    def test_dangling_endpoint_keeps_edge_without_node(self):
        """A gift naming an unknown user still yields its edge, but no node."""
        graph = build(USERS, [make_gift("g", "a", "ghost")])
        assert [n.id for n in graph.nodes] == ["a"]
        assert edge_map(graph) == {("a", "ghost"): 1.0}
        assert graph.resolvable_edges() == []


# ─── Determinism ──────────────────────────────────────────────────────────────


class TestIdempotence:
    def test_same_input_same_output(self):
        gifts = [make_gift("g1", "a", "b", tips=1), make_gift("g2", "b", "c"), make_gift("g3", "a", "b")]
        first = build(USERS, gifts)
        second = build(USERS, gifts)
        assert edge_map(first) == edge_map(second)
        assert first.node_ids() == second.node_ids()

    def test_fingerprint_stable_for_equal_content(self):
        gifts = [make_gift("g1", "a", "b")]
        assert build(USERS, gifts).fingerprint(800, 600) == build(USERS, list(gifts)).fingerprint(800, 600)

    def test_fingerprint_tracks_weight_and_viewport(self):
        base = build(USERS, [make_gift("g1", "a", "b")])
        tipped = build(USERS, [make_gift("g1", "a", "b", tips=1)])
        assert base.fingerprint(800, 600) != tipped.fingerprint(800, 600)
        assert base.fingerprint(800, 600) != base.fingerprint(801, 600)


# ─── networkx View ────────────────────────────────────────────────────────────


class TestDigraph:
    def test_digraph_has_weights(self):
        gifts = [make_gift("g1", "a", "b", tips=2), make_gift("g2", "b", "a")]
        g = build(USERS, gifts).to_digraph()
        assert isinstance(g, nx.DiGraph)
        assert g["a"]["b"]["weight"] == 2.0
        assert g["b"]["a"]["weight"] == 1.0
        assert g.nodes["a"]["data"].id == "a"

    def test_digraph_drops_dangling_edges(self):
        g = build(USERS, [make_gift("g", "a", "ghost"), make_gift("h", "a", "b")]).to_digraph()
        assert set(g.nodes) == {"a", "b"}
        assert list(g.edges) == [("a", "b")]

    def test_fingerprint_resists_separator_forgery(self):
        """Fields containing separator characters cannot alias another graph."""
        one = GiftGraph(edges=[GraphEdge(source="a|b", target="c", weight=1.0)])
        two = GiftGraph(edges=[GraphEdge(source="a", target="b|c", weight=1.0)])
        assert one.fingerprint(100, 100) != two.fingerprint(100, 100)

        named = GiftGraph(nodes=[GraphNode(id="x", name="n|#fff", avatar="", color="c")])
        shifted = GiftGraph(nodes=[GraphNode(id="x", name="n", avatar="", color="#fff|c")])
        assert named.fingerprint(100, 100) != shifted.fingerprint(100, 100)
