"""JSON page descriptions for renderers that take structured input."""

from __future__ import annotations

import json

from postkit.content.models import Document
from postkit.renderers.base import PageRenderer


class JsonRenderer(PageRenderer):
    """Writes one JSON object per document."""

    name = "json"
    suffix = ".json"

    def render(self, document: Document) -> str:
        page = {
            "layout": document.layout,
            "title": document.title,
            "slug": document.slug,
            "metadata": document.metadata,
            "body": document.body,
            "source": str(document.source_path) if document.source_path else None,
        }
        return json.dumps(page, indent=2, ensure_ascii=False) + "\n"
