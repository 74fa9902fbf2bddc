"""Batch build: read, render and write every document in a store.

Documents are independent, so they are processed on a thread pool with
no coordination. A failure in one document never stops the others.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pydantic import BaseModel, Field

from postkit.content.store import DocumentStore
from postkit.errors import DocumentReadError
from postkit.renderers.base import PageRenderer

logger = logging.getLogger(__name__)


class PageResult(BaseModel):
    """One page written by the build."""

    source: Path
    output: Path
    layout: str
    title: str
    degraded: bool = False


class BuildFailure(BaseModel):
    """A document the build could not publish."""

    source: Path
    error: str


class BuildResult(BaseModel):
    """Outcome of a build run."""

    pages: list[PageResult] = Field(default_factory=list)
    failures: list[BuildFailure] = Field(default_factory=list)

    @property
    def degraded(self) -> list[PageResult]:
        return [p for p in self.pages if p.degraded]

    @property
    def ok(self) -> bool:
        return not self.failures


def _build_one(
    store: DocumentStore,
    path: Path,
    output: Path,
    renderer: PageRenderer,
) -> PageResult | BuildFailure:
    try:
        document = store.read(path)
    except DocumentReadError as exc:
        logger.warning("%s", exc)
        return BuildFailure(source=path, error=exc.reason)

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(renderer.render(document), encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write %s: %s", output, exc)
        return BuildFailure(source=path, error=str(exc))

    if document.is_degraded:
        logger.info("Published %s with defaults (layout=%s)", path, document.layout)
    return PageResult(
        source=path,
        output=output,
        layout=document.layout,
        title=document.title,
        degraded=document.is_degraded,
    )


def build_site(
    store: DocumentStore,
    output_dir: Path,
    renderer: PageRenderer,
    *,
    workers: int | None = None,
) -> BuildResult:
    """Render every document in ``store`` into ``output_dir``.

    Args:
        store: Source of documents.
        output_dir: Directory pages are written to.
        renderer: Renderer applied to each document.
        workers: Thread pool size. ``None`` or ``0`` uses the executor default.

    Returns:
        BuildResult with pages and failures sorted by source path.
    """
    paths = store.discover()
    result = BuildResult()
    if not paths:
        logger.info("No documents found under %s", store.root)
        return result

    # Sources that render to the same page: the first in sorted order wins.
    claimed: dict[Path, Path] = {}
    for path in paths:
        output = renderer.output_path(output_dir, store.relative_to_root(path))
        if output in claimed:
            logger.warning(
                "Skipping %s: output %s already claimed by %s", path, output, claimed[output]
            )
            result.failures.append(
                BuildFailure(source=path, error=f"output {output} collides with {claimed[output]}")
            )
        else:
            claimed[output] = path

    with ThreadPoolExecutor(max_workers=workers or None) as executor:
        outcomes = list(
            executor.map(
                lambda item: _build_one(store, item[1], item[0], renderer),
                claimed.items(),
            )
        )

    for outcome in outcomes:
        if isinstance(outcome, BuildFailure):
            result.failures.append(outcome)
        else:
            result.pages.append(outcome)

    result.pages.sort(key=lambda p: p.source)
    result.failures.sort(key=lambda f: f.source)
    logger.info(
        "Built %d page(s) with %s renderer, %d failure(s)",
        len(result.pages),
        renderer.name,
        len(result.failures),
    )
    return result
