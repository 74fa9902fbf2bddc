"""Tests for near-duplicate detection."""

from pathlib import Path

import pytest

from postkit.content.duplicates import find_near_duplicates
from postkit.content.models import Document

BODY = (
    "Setting the navigation bar appearance globally keeps every screen "
    "consistent. Use the appearance proxy once in the app delegate."
)


def _doc(name: str, title: str, body: str) -> Document:
    return Document(
        layout="post",
        title=title,
        body=body,
        metadata={"title": title},
        source_path=Path(name),
    )


class TestFindNearDuplicates:
    def test_identical_bodies(self):
        docs = [_doc("a.md", "Nav bars", BODY), _doc("b.md", "Navigation bars", BODY)]
        pairs = find_near_duplicates(docs)
        assert len(pairs) == 1
        assert pairs[0].first == "a.md"
        assert pairs[0].second == "b.md"
        assert pairs[0].ratio == 1.0
        assert not pairs[0].same_title

    def test_minor_edit_detected(self):
        edited = BODY.replace("globally", "once globally")
        pairs = find_near_duplicates([_doc("a.md", "A", BODY), _doc("b.md", "B", edited)])
        assert len(pairs) == 1
        assert 0.9 <= pairs[0].ratio < 1.0

    def test_whitespace_and_case_ignored(self):
        reflowed = BODY.upper().replace(" ", "\n  ")
        pairs = find_near_duplicates([_doc("a.md", "A", BODY), _doc("b.md", "B", reflowed)])
        assert pairs[0].ratio == 1.0

    def test_same_title_reported(self):
        docs = [_doc("a.md", "Generic Views", "one thing"), _doc("b.md", "generic views", "another")]
        pairs = find_near_duplicates(docs)
        assert len(pairs) == 1
        assert pairs[0].same_title

    def test_unrelated_documents(self):
        docs = [_doc("a.md", "A", BODY), _doc("b.md", "B", "Localization with string tables.")]
        assert find_near_duplicates(docs) == []

    def test_untitled_documents_not_matched_by_title(self):
        docs = [
            Document(layout="default", title="Untitled", body="first body"),
            Document(layout="default", title="Untitled", body="completely different"),
        ]
        assert find_near_duplicates(docs) == []

    @pytest.mark.parametrize("threshold", [0, -0.5, 1.5])
    def test_invalid_threshold(self, threshold: float):
        with pytest.raises(ValueError):
            find_near_duplicates([], threshold=threshold)
