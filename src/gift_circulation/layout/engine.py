"""Layout engine — tick-driven force simulation with drag pinning.

The host owns scheduling: it calls ``step()`` from its frame or timer
callback and reads the returned LayoutResult, or registers ``on_tick``
listeners that ``step()`` notifies. Ticking stops by itself once alpha
cools below ``alpha_min``; a drag (``pin``) wakes it again.

One engine per (graph, viewport). ``LayoutController`` tears the old one
down before building the next, so a superseded engine can never touch the
new arena.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable, Sequence

from gift_circulation.graph import GiftGraph, GraphEdge, GraphNode
from gift_circulation.layout.forces import CenterForce, CollideForce, Force, LinkForce, ManyBodyForce
from gift_circulation.layout.types import (
    INITIAL_ANGLE,
    INITIAL_RADIUS,
    Body,
    LayoutConfig,
    LayoutResult,
    Link,
    PlacedEdge,
    PlacedNode,
    Point,
    SimulationState,
)

logger = logging.getLogger(__name__)

TickListener = Callable[[LayoutResult], None]

DEFAULT_MAX_TICKS = 1000


class LayoutEngine:
    """Force simulation over one graph inside a ``width`` × ``height`` viewport."""

    def __init__(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        width: float,
        height: float,
        config: LayoutConfig | None = None,
    ) -> None:
        self.config = config or LayoutConfig()
        self.width = width
        self.height = height
        self.alpha = self.config.alpha_start
        self.alpha_target = 0.0
        self.ticks = 0
        self.state = SimulationState.SEEDING

        self._rng = random.Random(self.config.seed)
        self._listeners: list[TickListener] = []
        self._dragging: set[str] = set()

        self._nodes: list[GraphNode] = []
        self._bodies: list[Body] = []
        self._index: dict[str, int] = {}
        self._edges: list[GraphEdge] = []
        self._links: list[Link] = []
        self._forces: list[Force] = []
        self._node_ids = {n.id for n in nodes}
        self.ready = width > 0 and height > 0

        if not self.ready:
            # Viewport not measured yet: stay inert.
            logger.debug("viewport %sx%s not ready, simulation not started", width, height)
            self.state = SimulationState.SETTLED
            return

        for node in nodes:
            if node.id in self._index:
                continue
            self._index[node.id] = len(self._bodies)
            self._bodies.append(Body(index=len(self._bodies), id=node.id, radius=node.radius))
            self._nodes.append(node)

        for edge in edges:
            src = self._index.get(edge.source)
            tgt = self._index.get(edge.target)
            if src is None or tgt is None:
                continue
            self._edges.append(edge)
            self._links.append(Link(source=src, target=tgt))

        self._seed()

        cfg = self.config
        self._forces = [
            LinkForce(cfg.link_distance),
            ManyBodyForce(cfg.charge_strength),
            CenterForce(width / 2, height / 2 + cfg.center_offset_y),
            CollideForce(cfg.collide_margin),
        ]
        for force in self._forces:
            force.initialize(self._bodies, self._links, self._jiggle)

        self.state = SimulationState.RUNNING if self._bodies else SimulationState.SETTLED
        logger.debug(
            "layout created: %d nodes, %d links (%d skipped), viewport %sx%s",
            len(self._bodies),
            len(self._links),
            len(edges) - len(self._links),
            width,
            height,
        )

    # ── Seeding ──

    def _seed(self) -> None:
        """Place bodies on a phyllotaxis spiral around the layout centre."""
        cx = self.width / 2
        cy = self.height / 2 + self.config.center_offset_y
        for body in self._bodies:
            radius = INITIAL_RADIUS * math.sqrt(0.5 + body.index)
            angle = body.index * INITIAL_ANGLE
            body.x = cx + radius * math.cos(angle)
            body.y = cy + radius * math.sin(angle)
            body.vx = body.vy = 0.0
        self._clamp()

    def _jiggle(self) -> float:
        return (self._rng.random() - 0.5) * 1e-6

    # ── Properties ──

    @property
    def running(self) -> bool:
        return self.state in (SimulationState.RUNNING, SimulationState.DRAGGING)

    @property
    def disposed(self) -> bool:
        return self.state is SimulationState.DISPOSED

    def __len__(self) -> int:
        return len(self._bodies)

    # ── Ticking ──

    def on_tick(self, listener: TickListener) -> TickListener:
        """Register ``listener`` to receive every tick's LayoutResult."""
        if self.disposed:
            logger.debug("on_tick ignored: engine disposed")
            return listener
        self._listeners.append(listener)
        return listener

    def _tick(self) -> None:
        cfg = self.config
        self.alpha += (self.alpha_target - self.alpha) * cfg.alpha_decay

        for force in self._forces:
            force.apply(self.alpha)

        keep = 1 - cfg.velocity_decay
        for body in self._bodies:
            if body.fx is None:
                body.vx *= keep
                body.x += body.vx
            else:
                body.x = body.fx
                body.vx = 0.0
            if body.fy is None:
                body.vy *= keep
                body.y += body.vy
            else:
                body.y = body.fy
                body.vy = 0.0

        self._clamp()
        self.ticks += 1

    def step(self) -> LayoutResult | None:
        """Run one tick if the simulation is live and notify listeners.

        Returns None once settled or disposed.
        """
        if not self.running:
            return None

        self._tick()
        if self.alpha < self.config.alpha_min:
            self.state = SimulationState.SETTLED
            logger.debug("layout settled after %d ticks", self.ticks)

        result = self.snapshot()
        for listener in list(self._listeners):
            # A listener may rebuild and dispose this engine mid-notification.
            if self.disposed:
                break
            listener(result)
        return result

    def run(self, max_ticks: int = DEFAULT_MAX_TICKS) -> int:
        """Step until settled or ``max_ticks`` is reached; return ticks taken."""
        taken = 0
        while taken < max_ticks and self.step() is not None:
            taken += 1
        return taken

    def _clamp(self) -> None:
        for body in self._bodies:
            r = body.radius
            body.x = max(r, min(self.width - r, body.x))
            body.y = max(r, min(self.height - r, body.y))

    # ── Dragging ──

    def pin(self, node_id: str, x: float, y: float) -> None:
        """Fix ``node_id`` at (x, y) until ``unpin``.

        The first pin of a drag wakes the simulation so neighbours react.
        Repeated pins of the same node move it.
        """
        if node_id not in self._node_ids:
            raise KeyError(node_id)
        if self.disposed or not self.ready:
            logger.debug("pin(%s) ignored: engine %s", node_id, "disposed" if self.disposed else "not ready")
            return
        body = self._bodies[self._index[node_id]]
        if not self._dragging:
            self.alpha_target = self.config.drag_alpha_target
        self._dragging.add(node_id)
        body.fx = max(body.radius, min(self.width - body.radius, x))
        body.fy = max(body.radius, min(self.height - body.radius, y))
        self.state = SimulationState.DRAGGING

    def unpin(self, node_id: str) -> None:
        """Release a pinned node; cooling resumes once no drag remains."""
        if self.disposed or not self.ready or node_id not in self._dragging:
            return
        self._dragging.discard(node_id)
        body = self._bodies[self._index[node_id]]
        body.fx = body.fy = None
        if not self._dragging:
            self.alpha_target = 0.0
            if self.state is SimulationState.DRAGGING:
                self.state = SimulationState.RUNNING

    # ── Output ──

    def snapshot(self) -> LayoutResult:
        """Current positions as Layout IR."""
        placed = [
            PlacedNode(
                id=body.id,
                x=body.x,
                y=body.y,
                radius=body.radius,
                label=node.name,
                color=node.color,
                avatar=node.avatar,
            )
            for body, node in zip(self._bodies, self._nodes)
        ]
        edges: list[PlacedEdge] = []
        for edge, link in zip(self._edges, self._links):
            s = self._bodies[link.source]
            t = self._bodies[link.target]
            edges.append(
                PlacedEdge(
                    source=edge.source,
                    target=edge.target,
                    weight=edge.weight,
                    start=Point(s.x, s.y),
                    end=Point(t.x, t.y),
                )
            )
        return LayoutResult(width=self.width, height=self.height, nodes=placed, edges=edges)

    def dispose(self) -> None:
        """Stop for good. Synchronous: no listener fires after this returns."""
        if self.disposed:
            return
        self.state = SimulationState.DISPOSED
        self._listeners.clear()
        self._dragging.clear()
        logger.debug("layout disposed after %d ticks", self.ticks)


def create_layout(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    width: float,
    height: float,
    config: LayoutConfig | None = None,
) -> LayoutEngine:
    """Build a fresh engine in the running state (or inert if the viewport is empty)."""
    return LayoutEngine(nodes, edges, width, height, config)


# ─── Controller ───────────────────────────────────────────────────────────────


class LayoutController:
    """Keeps exactly one live engine for the current graph and viewport.

    ``update`` rebuilds only when the content fingerprint changes. The old
    engine is disposed before the new one is constructed.
    """

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config
        self.engine: LayoutEngine | None = None
        self.rebuilds = 0
        self._key: str | None = None
        self._listeners: list[TickListener] = []

    def on_tick(self, listener: TickListener) -> TickListener:
        """Subscribe ``listener`` to the current and every future engine."""
        self._listeners.append(listener)
        if self.engine is not None:
            self.engine.on_tick(listener)
        return listener

    def update(self, graph: GiftGraph, width: float, height: float) -> bool:
        """Sync with ``graph`` at the given viewport; True if an engine was rebuilt."""
        if width <= 0 or height <= 0:
            if self.engine is not None:
                logger.info("viewport collapsed to %sx%s, stopping layout", width, height)
            self.dispose()
            return False

        key = graph.fingerprint(width, height)
        if key == self._key and self.engine is not None:
            return False

        self.dispose()
        engine = create_layout(graph.nodes, graph.edges, width, height, self.config)
        for listener in self._listeners:
            engine.on_tick(listener)
        self.engine = engine
        self._key = key
        self.rebuilds += 1
        logger.info(
            "layout rebuilt (#%d): %d nodes, %d edges, viewport %sx%s",
            self.rebuilds,
            len(graph.nodes),
            len(graph.edges),
            width,
            height,
        )
        return True

    def step(self) -> LayoutResult | None:
        if self.engine is None:
            return None
        return self.engine.step()

    def pin(self, node_id: str, x: float, y: float) -> None:
        if self.engine is not None:
            self.engine.pin(node_id, x, y)

    def unpin(self, node_id: str) -> None:
        if self.engine is not None:
            self.engine.unpin(node_id)

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self._key = None
