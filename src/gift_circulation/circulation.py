"""Circulation summary — who gives, who receives, and where gifts loop back."""

from __future__ import annotations

from dataclasses import dataclass, field

import networkx as nx

from gift_circulation.graph import GiftGraph


@dataclass
class UserFlow:
    """Weighted gift volume through one user."""

    id: str
    name: str
    given: float = 0.0
    received: float = 0.0

    @property
    def balance(self) -> float:
        return self.given - self.received


@dataclass
class CirculationSummary:
    flows: list[UserFlow] = field(default_factory=list)
    reciprocal_pairs: list[tuple[str, str]] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "flows": [
                {"id": f.id, "name": f.name, "given": f.given, "received": f.received, "balance": f.balance}
                for f in self.flows
            ],
            "reciprocal_pairs": [list(p) for p in self.reciprocal_pairs],
            "cycles": self.cycles,
        }


def _rotate_to_min(cycle: list[str]) -> list[str]:
    """Rotate a cycle so its smallest id comes first (stable output)."""
    i = cycle.index(min(cycle))
    return cycle[i:] + cycle[:i]


def summarize(graph: GiftGraph, max_cycle_length: int | None = None) -> CirculationSummary:
    """Summarise the resolvable part of ``graph``.

    Reciprocal pairs are reported once, ids in ascending order. Cycles are
    the elementary directed cycles of length >= 3 (2-cycles are the
    reciprocal pairs), optionally capped at ``max_cycle_length`` nodes.
    """
    g = graph.to_digraph()

    flows = [
        UserFlow(
            id=node_id,
            name=attrs["data"].name,
            given=g.out_degree(node_id, weight="weight"),
            received=g.in_degree(node_id, weight="weight"),
        )
        for node_id, attrs in g.nodes(data=True)
    ]

    pairs = sorted({tuple(sorted((u, v))) for u, v in g.edges() if g.has_edge(v, u)})

    cycles = [
        _rotate_to_min(c)
        for c in nx.simple_cycles(g, length_bound=max_cycle_length)
        if len(c) >= 3
    ]
    cycles.sort()

    return CirculationSummary(flows=flows, reciprocal_pairs=pairs, cycles=cycles)
