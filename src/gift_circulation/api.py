"""Public API — one-call helpers for headless use."""

from __future__ import annotations

from collections.abc import Iterable

from gift_circulation.graph import build
from gift_circulation.layout import DEFAULT_MAX_TICKS, LayoutConfig, LayoutResult, create_layout
from gift_circulation.models import Gift, User
from gift_circulation.renderers.base import Renderer
from gift_circulation.renderers.svg import SvgRenderer

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600


def layout_graph(
    users: Iterable[User],
    gifts: Iterable[Gift],
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
    max_ticks: int = DEFAULT_MAX_TICKS,
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """Build the gift graph and run the simulation until it settles."""
    graph = build(users, gifts)
    engine = create_layout(graph.nodes, graph.edges, width, height, config)
    try:
        engine.run(max_ticks)
        return engine.snapshot()
    finally:
        engine.dispose()


def render_svg(
    users: Iterable[User],
    gifts: Iterable[Gift],
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
    max_ticks: int = DEFAULT_MAX_TICKS,
    config: LayoutConfig | None = None,
    renderer: Renderer | None = None,
) -> str:
    """Build, lay out and render the gift graph (SVG unless ``renderer`` is given)."""
    renderer = renderer or SvgRenderer()
    return renderer.render(layout_graph(users, gifts, width, height, max_ticks, config))
