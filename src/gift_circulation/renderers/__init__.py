"""Renderers — turn Layout IR into output documents."""

from gift_circulation.renderers.base import Renderer
from gift_circulation.renderers.svg import SvgRenderer

__all__ = ["Renderer", "SvgRenderer"]
