"""SVG renderer — renders a LayoutResult snapshot to an SVG string."""

from __future__ import annotations

import math

from gift_circulation.layout.types import LayoutResult, PlacedEdge, PlacedNode

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_SIZE = 10
FONT_WEIGHT = 500
FONT_FAMILY = "sans-serif"
LABEL_GAP = 12  # label baseline below the circle edge
LABEL_FILL = "#4a4a4a"

EDGE_STROKE = "#999"
EDGE_OPACITY = 0.6
# Arrow tip sits outside the target circle (radius 24 + border + gap).
ARROW_REF_X = 34

NODE_STROKE = "#fff"
NODE_STROKE_WIDTH = 2


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _fmt(v: float) -> str:
    """Compact coordinate: two decimals, trailing zeros dropped."""
    text = f"{v:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def stroke_width(weight: float) -> float:
    """Edge thickness grows with the square root of aggregated weight."""
    return math.sqrt(weight) * 2


# ─── Edge Rendering ─────────────────────────────────────────────────────────


def _render_edge(pe: PlacedEdge) -> str:
    return (
        f'<line x1="{_fmt(pe.start.x)}" y1="{_fmt(pe.start.y)}" '
        f'x2="{_fmt(pe.end.x)}" y2="{_fmt(pe.end.y)}" '
        f'stroke="{EDGE_STROKE}" stroke-opacity="{EDGE_OPACITY}" '
        f'stroke-width="{_fmt(stroke_width(pe.weight))}" marker-end="url(#arrowhead)"/>'
    )


# ─── Node Rendering ─────────────────────────────────────────────────────────


def _render_node(pn: PlacedNode, index: int) -> str:
    r = _fmt(pn.radius)
    clip_id = f"clip-{index}"
    parts = [
        f'<g transform="translate({_fmt(pn.x)},{_fmt(pn.y)})" data-id="{_escape(pn.id)}">',
        f'  <circle r="{r}" fill="{_escape(pn.color)}" stroke="{NODE_STROKE}" stroke-width="{NODE_STROKE_WIDTH}"/>',
        f'  <clipPath id="{clip_id}"><circle r="{r}"/></clipPath>',
    ]
    if pn.avatar:
        size = _fmt(pn.radius * 2)
        parts.append(
            f'  <image href="{_escape(pn.avatar)}" x="-{r}" y="-{r}" width="{size}" height="{size}" '
            f'clip-path="url(#{clip_id})"/>'
        )
    parts.append(
        f'  <text x="0" y="{_fmt(pn.radius + LABEL_GAP)}" text-anchor="middle" '
        f'font-family="{FONT_FAMILY}" font-size="{FONT_SIZE}" font-weight="{FONT_WEIGHT}" '
        f'fill="{LABEL_FILL}">{_escape(pn.label)}</text>'
    )
    parts.append("</g>")
    return "\n".join(parts)


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes Layout IR, produces an SVG string.

    Edges are drawn first so nodes sit on top of them. Clip path ids are
    derived from node order, not from user ids, so they are always valid.
    """

    suffix = ".svg"

    def render(self, result: LayoutResult) -> str:
        w = _fmt(result.width)
        h = _fmt(result.height)
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">',
            "<defs>",
            f'  <marker id="arrowhead" viewBox="0 -5 10 10" refX="{ARROW_REF_X}" refY="0" '
            'orient="auto" markerWidth="6" markerHeight="6">',
            f'    <path d="M 0,-5 L 10,0 L 0,5" fill="{EDGE_STROKE}" stroke="none"/>',
            "  </marker>",
            "</defs>",
        ]

        if result.edges:
            parts.append("<g>")
            parts.extend(_render_edge(pe) for pe in result.edges)
            parts.append("</g>")

        if result.nodes:
            parts.append("<g>")
            parts.extend(_render_node(pn, i) for i, pn in enumerate(result.nodes))
            parts.append("</g>")

        parts.append("</svg>")
        return "\n".join(parts)
