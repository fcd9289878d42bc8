"""Unit tests for core/paths.py"""

import os

import pytest

from mdtree.core.errors import ConfigurationError
from mdtree.core.paths import (
    assert_disjoint,
    assert_output_confinement,
    join_posix,
    normalize_route_base,
    resolve_safe_dir,
    sanitize_prefix,
    to_url_path,
)


def test_resolve_safe_dir_inside_root(tmp_path):
    assert resolve_safe_dir(str(tmp_path), "public/content") == str(tmp_path / "public" / "content")


def test_resolve_safe_dir_normalizes_inner_dots(tmp_path):
    assert resolve_safe_dir(str(tmp_path), "a/../b") == str(tmp_path / "b")


@pytest.mark.parametrize("bad", ["/etc", "\\\\server\\share", "../../etc", "..", "a/../../x", ".", "", "  "])
def test_resolve_safe_dir_rejects(tmp_path, bad):
    with pytest.raises(ConfigurationError):
        resolve_safe_dir(str(tmp_path), bad)


def test_resolve_safe_dir_touches_no_filesystem(tmp_path, monkeypatch):
    """Rejection happens before any filesystem call."""
    def _boom(*a, **kw):
        raise AssertionError("filesystem accessed")
    monkeypatch.setattr(os, "mkdir", _boom)
    monkeypatch.setattr(os, "scandir", _boom)
    with pytest.raises(ConfigurationError):
        resolve_safe_dir(str(tmp_path), "../../etc")


def test_output_confinement_accepts_descendant(tmp_path):
    assert_output_confinement(str(tmp_path / "public" / "content"), str(tmp_path / "public"))


@pytest.mark.parametrize("rel", ["public", "elsewhere", "publicity/x", "."])
def test_output_confinement_rejects(tmp_path, rel):
    with pytest.raises(ConfigurationError):
        assert_output_confinement(os.path.normpath(str(tmp_path / rel)), str(tmp_path / "public"))


def test_assert_disjoint(tmp_path):
    assert_disjoint(str(tmp_path / "content"), str(tmp_path / "public" / "content"))
    with pytest.raises(ConfigurationError):
        assert_disjoint(str(tmp_path / "public" / "content" / "src"), str(tmp_path / "public" / "content"))
    with pytest.raises(ConfigurationError):
        assert_disjoint(str(tmp_path), str(tmp_path / "public" / "content"))


@pytest.mark.parametrize("raw,expected", [
    ("rei", "rei"),
    ("my app!", "my_app_"),
    ("a--b__c", "a--b__c"),
    ("  spaced  ", "spaced"),
    ("a.b/c", "a_b_c"),
    ("", "fallback"),
    ("   ", "fallback"),
])
def test_sanitize_prefix(raw, expected):
    assert sanitize_prefix(raw, "fallback") == expected


@pytest.mark.parametrize("raw,expected", [
    ("/content", "/content"),
    ("content", "/content"),
    ("/content/", "/content"),
    ("/", "/"),
    ("", "/content"),
    ("/a/b/", "/a/b"),
])
def test_normalize_route_base(raw, expected):
    assert normalize_route_base(raw) == expected


def test_to_url_path():
    assert to_url_path("/content", "blog/a.json") == "/content/blog/a.json"
    assert to_url_path("/", "blog/a.json") == "/blog/a.json"
    assert to_url_path("/content", "") == "/content"


def test_join_posix():
    assert join_posix("public\\content", "blog/a.json") == "public/content/blog/a.json"
    assert join_posix("content/", "a.md") == "content/a.md"
