"""Base class for page renderers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from postkit.content.models import Document


class PageRenderer(ABC):
    """Turns a Document into a publishable page for an external generator."""

    name: str = ""
    suffix: str = ""

    @abstractmethod
    def render(self, document: Document) -> str:
        """Render a document to page text."""

    def output_path(self, output_dir: Path, relative_path: Path) -> Path:
        """Compute where the page for ``relative_path`` is written."""
        return output_dir / relative_path.with_suffix(self.suffix)
