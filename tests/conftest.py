"""Root test configuration: isolated project directory and file helpers"""

from pathlib import Path

import pytest

from mdtree.config import ENV_KEYS


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Keep host environment variables out of settings resolution."""
    for keys in ENV_KEYS.values():
        for key in keys:
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(name="project")
def project_fixture(tmp_path, monkeypatch):
    """A clean project root, also the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(name="write")
def write_fixture(project):
    """Write text to a path relative to the project root, creating parents."""
    def _write(rel: str, text: str = "", binary: bytes = None) -> Path:
        p = project / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        if binary is not None:
            p.write_bytes(binary)
        else:
            p.write_text(text, encoding="utf-8", newline="")
        return p
    return _write
