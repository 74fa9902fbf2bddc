"""Tests for page renderers and the renderer factory."""

import json
from pathlib import Path

import pytest

from postkit.content.frontmatter import parse_front_matter
from postkit.content.models import Document
from postkit.renderers import RendererKind, create_renderer
from postkit.renderers.json_page import JsonRenderer
from postkit.renderers.markdown import MarkdownRenderer


@pytest.fixture
def post() -> Document:
    return Document.from_text(
        "---\nlayout: post\ntitle: Nav bars\ntags:\n  - ios\n---\nBody text\n",
        source_path=Path("/site/_posts/nav-bars.md"),
    )


@pytest.fixture
def bare() -> Document:
    return Document.from_text("---\nA rule, then prose.\n")


class TestCreateRenderer:
    def test_markdown(self):
        assert isinstance(create_renderer(RendererKind.MARKDOWN), MarkdownRenderer)

    def test_json_from_string(self):
        assert isinstance(create_renderer("json"), JsonRenderer)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown renderer"):
            create_renderer("html")


class TestMarkdownRenderer:
    def test_keeps_metadata_and_body(self, post: Document):
        metadata, body = parse_front_matter(MarkdownRenderer().render(post))
        assert metadata == {"layout": "post", "title": "Nav bars", "tags": ["ios"]}
        assert body == "Body text\n"

    def test_degraded_document_gets_defaults(self, bare: Document):
        metadata, body = parse_front_matter(MarkdownRenderer().render(bare))
        assert metadata == {"layout": "default", "title": "Untitled"}
        assert body == "---\nA rule, then prose.\n"

    def test_output_path(self):
        path = MarkdownRenderer().output_path(Path("out"), Path("_posts/a.markdown"))
        assert path == Path("out/_posts/a.md")


class TestJsonRenderer:
    def test_page_description(self, post: Document):
        page = json.loads(JsonRenderer().render(post))
        assert page["layout"] == "post"
        assert page["title"] == "Nav bars"
        assert page["slug"] == "nav-bars"
        assert page["body"] == "Body text\n"
        assert page["metadata"]["tags"] == ["ios"]
        assert page["source"] == str(Path("/site/_posts/nav-bars.md"))

    def test_no_source(self, bare: Document):
        page = json.loads(JsonRenderer().render(bare))
        assert page["source"] is None
        assert page["title"] == "Untitled"

    def test_output_path(self):
        path = JsonRenderer().output_path(Path("out"), Path("notes.txt"))
        assert path == Path("out/notes.json")
