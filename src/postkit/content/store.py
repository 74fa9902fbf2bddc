"""Filesystem-backed document store.

Discovers content files under a root directory and reads them into
Documents. The store is read-only: documents are authored elsewhere.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from postkit.content.models import DEFAULT_LAYOUT, DEFAULT_TITLE, Document
from postkit.errors import DocumentReadError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".md", ".markdown", ".txt")


class DocumentStore:
    """Reads content documents from a directory tree."""

    def __init__(
        self,
        root: Path,
        *,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        default_layout: str = DEFAULT_LAYOUT,
        default_title: str = DEFAULT_TITLE,
        exclude: Iterable[Path] = (),
    ) -> None:
        self.root = Path(root)
        self.extensions = tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions
        )
        self.default_layout = default_layout
        self.default_title = default_title
        self.exclude = tuple(Path(p).resolve() for p in exclude)

    def _is_skipped(self, path: Path) -> bool:
        relative = path.relative_to(self.root)
        if any(part.startswith(".") for part in relative.parts):
            return True
        resolved = path.resolve()
        return any(resolved.is_relative_to(excluded) for excluded in self.exclude)

    def discover(self) -> list[Path]:
        """Return every content file under the root, sorted.

        Hidden files and directories and anything under ``exclude`` are skipped.
        """
        if not self.root.is_dir():
            return []

        paths = [
            path
            for path in self.root.rglob("*")
            if path.is_file()
            and path.suffix.lower() in self.extensions
            and not self._is_skipped(path)
        ]
        return sorted(paths)

    def read(self, path: Path) -> Document:
        """Read and parse a single document.

        Raises:
            DocumentReadError: If the file cannot be read or is not UTF-8.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DocumentReadError(path, f"not valid UTF-8 ({exc.reason})") from exc
        except OSError as exc:
            raise DocumentReadError(path, exc.strerror or str(exc)) from exc

        document = Document.from_text(
            text,
            source_path=path,
            default_layout=self.default_layout,
            default_title=self.default_title,
        )
        if not document.has_front_matter:
            logger.debug("No front matter in %s, using defaults", path)
        return document

    def read_all(self) -> list[Document]:
        """Read every discovered document, skipping unreadable files."""
        documents: list[Document] = []
        for path in self.discover():
            try:
                documents.append(self.read(path))
            except DocumentReadError as exc:
                logger.warning("%s", exc)
        return documents

    def relative_to_root(self, path: Path) -> Path:
        """``path`` relative to the store root, or its bare name if outside it."""
        try:
            return path.relative_to(self.root)
        except ValueError:
            return Path(path.name)

    def relative_path(self, document: Document) -> Path:
        """Path of ``document`` relative to the store root."""
        if document.source_path is None:
            return Path(f"{document.slug}.md")
        return self.relative_to_root(document.source_path)
