"""Tests for layered configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

import postkit.config as config_module
from postkit.config import PostkitConfig, load_config, merge_cli_overrides
from postkit.renderers import RendererKind

ENV_VARS = [
    "POSTKIT_SOURCE_DIR",
    "POSTKIT_OUTPUT_DIR",
    "POSTKIT_RENDERER",
    "POSTKIT_WORKERS",
    "POSTKIT_DEFAULT_LAYOUT",
    "POSTKIT_DEFAULT_TITLE",
]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "GLOBAL_CONFIG_PATH", tmp_path / "global.toml")


class TestDefaults:
    def test_default_values(self):
        config = load_config()
        assert config.site.source_dir == "."
        assert config.site.default_layout == "default"
        assert config.site.default_title == "Untitled"
        assert config.site.extensions == [".md", ".markdown", ".txt"]
        assert config.build.output_dir == "./_site"
        assert config.build.renderer == RendererKind.MARKDOWN
        assert config.build.workers == 0
        assert config.duplicates.threshold == 0.9


class TestLoadToml:
    def test_explicit_path(self, tmp_path: Path):
        path = tmp_path / "custom.toml"
        path.write_text(
            '[site]\nsource_dir = "posts"\ndefault_layout = "post"\n'
            '[build]\nrenderer = "json"\nworkers = 4\n',
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.source_path == Path("posts")
        assert config.site.default_layout == "post"
        assert config.build.renderer == RendererKind.JSON
        assert config.build.workers == 4

    def test_cwd_file(self, tmp_path: Path):
        (tmp_path / ".postkit.toml").write_text('[build]\noutput_dir = "public"\n', encoding="utf-8")
        assert load_config().output_path == Path("public")

    def test_global_file(self, tmp_path: Path):
        (tmp_path / "global.toml").write_text('[site]\ndefault_title = "Draft"\n', encoding="utf-8")
        assert load_config().site.default_title == "Draft"

    def test_cwd_file_wins_over_global(self, tmp_path: Path):
        (tmp_path / ".postkit.toml").write_text('[site]\ndefault_title = "Local"\n', encoding="utf-8")
        (tmp_path / "global.toml").write_text('[site]\ndefault_title = "Global"\n', encoding="utf-8")
        assert load_config().site.default_title == "Local"

    def test_missing_explicit_path(self, tmp_path: Path):
        assert load_config(tmp_path / "nope.toml") == PostkitConfig()

    def test_malformed_toml_ignored(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[site\nsource_dir = ", encoding="utf-8")
        assert load_config(path) == PostkitConfig()

    def test_invalid_values_ignored(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text('[build]\nworkers = -3\n', encoding="utf-8")
        assert load_config(path).build.workers == 0


class TestEnvVars:
    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        (tmp_path / ".postkit.toml").write_text('[site]\nsource_dir = "posts"\n', encoding="utf-8")
        monkeypatch.setenv("POSTKIT_SOURCE_DIR", "articles")
        monkeypatch.setenv("POSTKIT_RENDERER", "json")
        monkeypatch.setenv("POSTKIT_WORKERS", "8")
        config = load_config()
        assert config.site.source_dir == "articles"
        assert config.build.renderer == RendererKind.JSON
        assert config.build.workers == 8

    def test_non_integer_workers_ignored(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("POSTKIT_WORKERS", "many")
        assert load_config().build.workers == 0

    def test_unknown_renderer_rejected(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("POSTKIT_RENDERER", "html")
        with pytest.raises(ValidationError):
            load_config()


class TestMergeCliOverrides:
    def test_none_values_skipped(self):
        base = PostkitConfig()
        merged = merge_cli_overrides(base, source_dir=None, renderer=None)
        assert merged == base

    def test_overrides_applied(self):
        merged = merge_cli_overrides(
            PostkitConfig(),
            source_dir=Path("posts"),
            output_dir=Path("public"),
            renderer="json",
            workers=2,
            threshold=0.75,
        )
        assert merged.site.source_dir == "posts"
        assert merged.build.output_dir == "public"
        assert merged.build.renderer == RendererKind.JSON
        assert merged.build.workers == 2
        assert merged.duplicates.threshold == 0.75

    def test_unknown_key(self):
        with pytest.raises(TypeError):
            merge_cli_overrides(PostkitConfig(), colour="blue")
