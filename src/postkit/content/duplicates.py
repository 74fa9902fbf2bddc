"""Near-duplicate detection across documents.

Reports pairs of posts that look like copies of each other. Whether a
pair is a draft and its revision or an accidental duplicate is left to
the author.
"""

from __future__ import annotations

import logging
from difflib import SequenceMatcher
from itertools import combinations

from pydantic import BaseModel

from postkit.content.models import Document

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.9


class DuplicatePair(BaseModel):
    """Two documents whose titles or bodies match."""

    first: str
    second: str
    ratio: float
    same_title: bool = False


def _label(document: Document) -> str:
    if document.source_path is not None:
        return str(document.source_path)
    return document.slug


def _normalize(text: str) -> str:
    return " ".join(text.split()).lower()


def find_near_duplicates(
    documents: list[Document],
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[DuplicatePair]:
    """Return document pairs with equal titles or similar bodies.

    Args:
        documents: Documents to compare pairwise.
        threshold: Minimum body similarity ratio, in ``(0, 1]``.

    Returns:
        Pairs sorted by descending similarity.

    Raises:
        ValueError: If the threshold is out of range.
    """
    if not 0 < threshold <= 1:
        raise ValueError(f"threshold must be in (0, 1], got {threshold}")

    normalized = [(doc, _normalize(doc.body), _normalize(doc.title)) for doc in documents]
    pairs: list[DuplicatePair] = []

    for (doc_a, body_a, title_a), (doc_b, body_b, title_b) in combinations(normalized, 2):
        same_title = doc_a.has_title and doc_b.has_title and title_a == title_b
        matcher = SequenceMatcher(None, body_a, body_b, autojunk=False)
        # quick_ratio is an upper bound on ratio
        if not same_title and matcher.quick_ratio() < threshold:
            continue
        ratio = matcher.ratio()
        if same_title or ratio >= threshold:
            pairs.append(
                DuplicatePair(
                    first=_label(doc_a),
                    second=_label(doc_b),
                    ratio=round(ratio, 4),
                    same_title=same_title,
                )
            )

    logger.debug("Compared %d documents, found %d duplicate pairs", len(documents), len(pairs))
    return sorted(pairs, key=lambda p: (-p.ratio, p.first, p.second))
