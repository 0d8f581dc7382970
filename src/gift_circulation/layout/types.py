"""Layout types — tuning constants, engine state, and the Layout IR handed to renderers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

# ─── Tuning Constants ─────────────────────────────────────────────────────────

LINK_DISTANCE: float = 100.0
CHARGE_STRENGTH: float = -300.0
COLLIDE_MARGIN: float = 10.0
# Centre is lifted to leave room for UI docked along the bottom edge.
CENTER_OFFSET_Y: float = -40.0

ALPHA_START: float = 1.0
ALPHA_MIN: float = 0.001
# Decay that takes alpha from 1.0 to ALPHA_MIN in ~300 ticks.
ALPHA_DECAY: float = 1 - math.pow(ALPHA_MIN, 1 / 300)
VELOCITY_DECAY: float = 0.4
DRAG_ALPHA_TARGET: float = 0.3

# Phyllotaxis seeding.
INITIAL_RADIUS: float = 10.0
INITIAL_ANGLE: float = math.pi * (3 - math.sqrt(5))


@dataclass(frozen=True)
class LayoutConfig:
    """Force and cooling parameters for one engine instance."""

    link_distance: float = LINK_DISTANCE
    charge_strength: float = CHARGE_STRENGTH
    collide_margin: float = COLLIDE_MARGIN
    center_offset_y: float = CENTER_OFFSET_Y
    alpha_start: float = ALPHA_START
    alpha_min: float = ALPHA_MIN
    alpha_decay: float = ALPHA_DECAY
    velocity_decay: float = VELOCITY_DECAY
    drag_alpha_target: float = DRAG_ALPHA_TARGET
    seed: int | None = None


class SimulationState(Enum):
    SEEDING = "seeding"
    RUNNING = "running"
    DRAGGING = "dragging"
    SETTLED = "settled"
    DISPOSED = "disposed"


# ─── Simulation Arena ─────────────────────────────────────────────────────────


@dataclass
class Body:
    """Mutable simulation record for one node, addressed by its arena index."""

    index: int
    id: str
    radius: float
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None


@dataclass(frozen=True)
class Link:
    """Edge between two arena indices."""

    source: int
    target: int


# ─── Layout IR ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class PlacedNode:
    """A node at its current simulated position."""

    id: str
    x: float
    y: float
    radius: float
    label: str = ""
    color: str = "#999"
    avatar: str = ""


@dataclass(frozen=True)
class PlacedEdge:
    """An edge whose endpoints both resolved to placed nodes."""

    source: str
    target: str
    weight: float
    start: Point
    end: Point


@dataclass(frozen=True)
class LayoutResult:
    """Snapshot of one tick, the input to renderers."""

    width: float
    height: float
    nodes: list[PlacedNode] = field(default_factory=list)
    edges: list[PlacedEdge] = field(default_factory=list)

    def positions(self) -> dict[str, Point]:
        return {n.id: Point(n.x, n.y) for n in self.nodes}
