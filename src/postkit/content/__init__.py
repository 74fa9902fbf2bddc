"""Content domain -- document model, front-matter parser and store."""

from postkit.content.duplicates import DuplicatePair, find_near_duplicates
from postkit.content.frontmatter import (
    compose_document,
    parse_front_matter,
    serialize_front_matter,
    split_front_matter,
)
from postkit.content.models import DEFAULT_LAYOUT, DEFAULT_TITLE, Document
from postkit.content.store import DocumentStore

__all__ = [
    "DEFAULT_LAYOUT",
    "DEFAULT_TITLE",
    "Document",
    "DocumentStore",
    "DuplicatePair",
    "compose_document",
    "find_near_duplicates",
    "parse_front_matter",
    "serialize_front_matter",
    "split_front_matter",
]
