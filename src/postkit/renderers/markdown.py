"""Normalized markdown renderer for Jekyll-style site generators."""

from __future__ import annotations

from postkit.content.frontmatter import compose_document
from postkit.content.models import Document
from postkit.renderers.base import PageRenderer


class MarkdownRenderer(PageRenderer):
    """Re-emits each document with explicit ``layout`` and ``title`` keys.

    The body passes through unchanged, so degraded documents pick up the
    default layout and title without losing any text.
    """

    name = "markdown"
    suffix = ".md"

    def render(self, document: Document) -> str:
        return compose_document(document.resolved_metadata(), document.body)
