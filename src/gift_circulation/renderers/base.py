"""Renderer protocol shared by every output format."""

from __future__ import annotations

from typing import Protocol

from gift_circulation.layout.types import LayoutResult


class Renderer(Protocol):
    """Turns one layout snapshot into a document.

    ``suffix`` is the file extension (with dot) the CLI appends when the
    requested output path has none.
    """

    suffix: str

    def render(self, result: LayoutResult) -> str: ...
