"""Page renderer factory and registry."""

from __future__ import annotations

from enum import StrEnum

from postkit.renderers.base import PageRenderer


class RendererKind(StrEnum):
    """Available page renderers."""

    MARKDOWN = "markdown"
    JSON = "json"


def create_renderer(kind: RendererKind | str) -> PageRenderer:
    """Create a renderer by kind.

    Raises:
        ValueError: If the kind is unknown.
    """
    if isinstance(kind, str):
        try:
            kind = RendererKind(kind)
        except ValueError:
            raise ValueError(f"Unknown renderer: {kind!r}") from None

    from postkit.renderers.json_page import JsonRenderer
    from postkit.renderers.markdown import MarkdownRenderer

    renderers: dict[RendererKind, PageRenderer] = {
        RendererKind.MARKDOWN: MarkdownRenderer(),
        RendererKind.JSON: JsonRenderer(),
    }
    return renderers[kind]


__all__ = ["PageRenderer", "RendererKind", "create_renderer"]
