"""Forces — velocity contributions combined additively each tick.

Each force is initialised once with the body arena and the index-based link
list, then applied once per tick with the current alpha. Coincident bodies
are separated by a tiny random jiggle so no force divides by zero.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from gift_circulation.layout.types import Body, Link

Jiggle = Callable[[], float]


class Force:
    """Base class: forces see the arena, never GraphNode objects."""

    def initialize(self, bodies: list[Body], links: list[Link], jiggle: Jiggle) -> None:
        self.bodies = bodies
        self.links = links
        self.jiggle = jiggle

    def apply(self, alpha: float) -> None:
        raise NotImplementedError


# ─── Link ─────────────────────────────────────────────────────────────────────


class LinkForce(Force):
    """Spring pulling each link's endpoints toward ``distance`` apart.

    Strength is ``1 / min(degree(source), degree(target))`` so hubs are not
    yanked around by their many links. The correction is split between the
    endpoints by degree (``bias``): the lower-degree end moves more.
    Edge weight plays no part here.
    """

    def __init__(self, distance: float) -> None:
        self.distance = distance
        self.strengths: list[float] = []
        self.bias: list[float] = []

    def initialize(self, bodies: list[Body], links: list[Link], jiggle: Jiggle) -> None:
        super().initialize(bodies, links, jiggle)
        count = [0] * len(bodies)
        for link in links:
            count[link.source] += 1
            count[link.target] += 1
        self.strengths = [1 / min(count[lk.source], count[lk.target]) for lk in links]
        self.bias = [count[lk.source] / (count[lk.source] + count[lk.target]) for lk in links]

    def apply(self, alpha: float) -> None:
        for link, strength, bias in zip(self.links, self.strengths, self.bias):
            source = self.bodies[link.source]
            target = self.bodies[link.target]
            x = target.x + target.vx - source.x - source.vx or self.jiggle()
            y = target.y + target.vy - source.y - source.vy or self.jiggle()
            dist = math.sqrt(x * x + y * y)
            k = (dist - self.distance) / dist * alpha * strength
            x *= k
            y *= k
            target.vx -= x * bias
            target.vy -= y * bias
            source.vx += x * (1 - bias)
            source.vy += y * (1 - bias)


# ─── Many-Body ────────────────────────────────────────────────────────────────


class ManyBodyForce(Force):
    """Charge between every pair of bodies, falling off with squared distance.

    Negative strength repels. Exact O(n²); gift graphs are small.
    """

    def __init__(self, strength: float, distance_min: float = 1.0) -> None:
        self.strength = strength
        self.distance_min2 = distance_min * distance_min

    def apply(self, alpha: float) -> None:
        for body in self.bodies:
            for other in self.bodies:
                if other is body:
                    continue
                x = other.x - body.x
                y = other.y - body.y
                l2 = x * x + y * y
                if x == 0:
                    x = self.jiggle()
                    l2 += x * x
                if y == 0:
                    y = self.jiggle()
                    l2 += y * y
                if l2 < self.distance_min2:
                    l2 = math.sqrt(self.distance_min2 * l2)
                w = self.strength * alpha / l2
                body.vx += x * w
                body.vy += y * w


# ─── Centre ───────────────────────────────────────────────────────────────────


class CenterForce(Force):
    """Translate all bodies so their centroid sits on (cx, cy).

    Acts on positions, not velocities, so it never adds energy.
    """

    def __init__(self, cx: float, cy: float, strength: float = 1.0) -> None:
        self.cx = cx
        self.cy = cy
        self.strength = strength

    def apply(self, alpha: float) -> None:
        n = len(self.bodies)
        if n == 0:
            return
        sx = sum(b.x for b in self.bodies) / n
        sy = sum(b.y for b in self.bodies) / n
        dx = (sx - self.cx) * self.strength
        dy = (sy - self.cy) * self.strength
        for b in self.bodies:
            b.x -= dx
            b.y -= dy


# ─── Collision ────────────────────────────────────────────────────────────────


class CollideForce(Force):
    """Keep bodies at least ``radius + margin`` apart (each side).

    Looks ahead to next-tick positions (x + vx). Overlap is resolved in
    proportion to the squared radii, so a small body yields to a large one.
    Not scaled by alpha: overlap is removed even once the layout has cooled.
    """

    def __init__(self, margin: float, strength: float = 1.0) -> None:
        self.margin = margin
        self.strength = strength

    def apply(self, alpha: float) -> None:
        bodies = self.bodies
        for i, body in enumerate(bodies):
            ri = body.radius + self.margin
            ri2 = ri * ri
            xi = body.x + body.vx
            yi = body.y + body.vy
            for other in bodies[i + 1 :]:
                rj = other.radius + self.margin
                r = ri + rj
                x = xi - other.x - other.vx
                y = yi - other.y - other.vy
                l2 = x * x + y * y
                if l2 >= r * r:
                    continue
                if x == 0:
                    x = self.jiggle()
                    l2 += x * x
                if y == 0:
                    y = self.jiggle()
                    l2 += y * y
                dist = math.sqrt(l2)
                k = (r - dist) / dist * self.strength
                x *= k
                y *= k
                rj2 = rj * rj
                share = rj2 / (ri2 + rj2)
                body.vx += x * share
                body.vy += y * share
                other.vx -= x * (1 - share)
                other.vy -= y * (1 - share)
