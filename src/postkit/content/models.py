"""Content domain models -- pure Pydantic v2 data types.

A Document is immutable once published: a revised post is a new
document, never an edit in place.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from postkit.content.frontmatter import Metadata, compose_document, parse_front_matter

DEFAULT_LAYOUT = "default"
DEFAULT_TITLE = "Untitled"

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase ``text`` and collapse non-alphanumerics into hyphens."""
    return _SLUG_STRIP_RE.sub("-", text.lower()).strip("-")


class Document(BaseModel):
    """A parsed content document: layout, title, body and raw metadata."""

    model_config = ConfigDict(frozen=True)

    layout: str
    title: str
    body: str
    metadata: dict[str, str | list[str]] = Field(default_factory=dict)
    source_path: Path | None = None
    has_front_matter: bool = True

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        source_path: Path | None = None,
        default_layout: str = DEFAULT_LAYOUT,
        default_title: str = DEFAULT_TITLE,
    ) -> Document:
        """Parse document text, falling back to defaults for missing keys."""
        metadata, body = parse_front_matter(text)
        layout = metadata.get("layout")
        title = metadata.get("title")
        return cls(
            layout=layout if isinstance(layout, str) and layout.strip() else default_layout,
            title=title if isinstance(title, str) and title.strip() else default_title,
            body=body,
            metadata=metadata,
            source_path=source_path,
            has_front_matter=bool(metadata),
        )

    @property
    def has_title(self) -> bool:
        title = self.metadata.get("title")
        return isinstance(title, str) and bool(title.strip())

    @property
    def is_degraded(self) -> bool:
        """True when published with a default title or without front matter."""
        return not self.has_front_matter or not self.has_title

    @property
    def slug(self) -> str:
        if self.source_path is not None:
            return self.source_path.stem
        return slugify(self.title) or "untitled"

    def resolved_metadata(self) -> Metadata:
        """Metadata with the effective ``layout`` and ``title`` filled in."""
        resolved: Metadata = dict(self.metadata)
        resolved["layout"] = self.layout
        resolved["title"] = self.title
        return resolved

    def to_text(self) -> str:
        """Re-serialize the document exactly as it was parsed."""
        return compose_document(self.metadata, self.body)
