"""Unit tests for config.py"""

import pytest

from mdtree.config import Settings, env_overrides, load_config, parse_bool


def test_load_config_defaults(project):
    """Defaults apply when no config.yaml, env var, or override exists."""
    settings = load_config()
    assert settings.prefix == "rei"
    assert settings.source_dir == "content"
    assert settings.output_dir == "public/content"
    assert settings.route_base == "/content"
    assert settings.clean_output is True


def test_load_config_env_priority(project, monkeypatch):
    """The first listed env var wins over later aliases."""
    monkeypatch.setenv("REI_PUBLIC_APP_PREFIX_NAME", "second")
    monkeypatch.setenv("REI_GLOBAL_PREFIX_NAME", "first")
    assert load_config().prefix == "first"


def test_load_config_env_alias_fallback(project, monkeypatch):
    """A lower-priority alias is used when higher ones are unset or blank."""
    monkeypatch.setenv("REI_CONTENT_SOURCE_DIR", "   ")
    monkeypatch.setenv("REI_PUBLIC_APP_CONTENT_SOURCE_DIR", "docs")
    assert load_config().source_dir == "docs"


def test_load_config_env_overrides_config_yaml(project, monkeypatch):
    """Env vars take precedence over config.yaml."""
    (project / "config.yaml").write_text("output_dir: public/site\nroute_base: /site\n")
    monkeypatch.setenv("MDTREE_OUTPUT_DIR", "public/other")
    settings = load_config()
    assert settings.output_dir == "public/other"
    assert settings.route_base == "/site"


def test_load_config_cli_overrides_env(project, monkeypatch):
    """A non-None override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("MDTREE_PREFIX", "env")
    settings = load_config(overrides={"prefix": "cli", "source_dir": None})
    assert settings.prefix == "cli"
    assert settings.source_dir == "content"


def test_load_config_invalid_yaml(project):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (project / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


@pytest.mark.parametrize("raw,expected", [
    ("true", True), ("1", True), ("YES", True), (" on ", True),
    ("false", False), ("0", False), ("No", False), ("OFF", False),
    ("maybe", True), ("", True),
])
def test_clean_output_env_parsing(project, monkeypatch, raw, expected):
    """Boolean-ish strings parse case-insensitively; unknown values fall back to True."""
    monkeypatch.setenv("MDTREE_CLEAN_OUTPUT", raw)
    assert load_config().clean_output is expected


def test_parse_bool_respects_default():
    assert parse_bool("garbage", default=False) is False
    assert parse_bool(False, default=True) is False


def test_blank_values_fall_back_to_defaults():
    settings = Settings(source_dir="  ", route_base="", prefix=None)
    assert settings.source_dir == "content"
    assert settings.route_base == "/content"
    assert settings.prefix == "rei"


def test_env_overrides_reads_given_mapping():
    data = env_overrides({"REI_CONTENT_ROUTE_BASE": "/docs", "UNRELATED": "x"})
    assert data == {"route_base": "/docs"}
