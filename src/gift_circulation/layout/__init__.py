"""Layout package — force-directed placement of the gift graph.

Modules:
  types   — tuning constants, simulation arena records, Layout IR
  forces  — link, many-body, centre and collision forces
  engine  — tick loop, drag pinning, boundary clamp, rebuild controller
"""

from gift_circulation.layout.engine import (
    DEFAULT_MAX_TICKS,
    LayoutController,
    LayoutEngine,
    TickListener,
    create_layout,
)
from gift_circulation.layout.forces import CenterForce, CollideForce, Force, LinkForce, ManyBodyForce
from gift_circulation.layout.types import (
    ALPHA_DECAY,
    ALPHA_MIN,
    CENTER_OFFSET_Y,
    CHARGE_STRENGTH,
    COLLIDE_MARGIN,
    DRAG_ALPHA_TARGET,
    LINK_DISTANCE,
    VELOCITY_DECAY,
    Body,
    LayoutConfig,
    LayoutResult,
    Link,
    PlacedEdge,
    PlacedNode,
    Point,
    SimulationState,
)

__all__ = [
    "ALPHA_DECAY",
    "ALPHA_MIN",
    "CENTER_OFFSET_Y",
    "CHARGE_STRENGTH",
    "COLLIDE_MARGIN",
    "DEFAULT_MAX_TICKS",
    "DRAG_ALPHA_TARGET",
    "LINK_DISTANCE",
    "VELOCITY_DECAY",
    "Body",
    "CenterForce",
    "CollideForce",
    "Force",
    "LayoutConfig",
    "LayoutController",
    "LayoutEngine",
    "LayoutResult",
    "Link",
    "LinkForce",
    "ManyBodyForce",
    "PlacedEdge",
    "PlacedNode",
    "Point",
    "SimulationState",
    "TickListener",
    "create_layout",
]
