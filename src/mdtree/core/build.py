"""Build orchestration: validate configuration, clean output, walk content, persist the index

One build is a full, fresh materialization of the output tree. It must not run
twice concurrently against the same output directory.
"""

import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from mdtree.config import Settings
from mdtree.core.models import IndexEnvelope, dump_json
from mdtree.core.paths import (
    assert_disjoint,
    assert_output_confinement,
    normalize_route_base,
    resolve_safe_dir,
    sanitize_prefix,
    to_posix,
    to_url_path,
)
from mdtree.core.walk import WalkContext, ensure_parent_dir, walk


logger = logging.getLogger(__name__)

TREE_FILE_SUFFIX = "_tree.json"
DEFAULT_PREFIX = "rei"


@dataclass
class BuildResult:
    envelope: IndexEnvelope
    index_path: Path
    warnings: list[str] = field(default_factory=list)
    markdown_count: int = 0
    file_count: int = 0


def tree_file_name(prefix: str) -> str:
    """Index file name for an already sanitized prefix: _{prefix}_tree.json."""
    return f"_{prefix}{TREE_FILE_SUFFIX}"


def root_name(source_dir_posix: str) -> str:
    """Last non-empty segment of the source dir, or 'content'."""
    parts = [p for p in source_dir_posix.split("/") if p and p != "."]
    return parts[-1] if parts else "content"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def clean_output_dir(output_root: Path) -> list[str]:
    """Delete output_root. A missing root is fine; every other failure is logged and returned.

    A symlinked or file output root is unlinked itself; nothing outside it is touched.
    """
    warnings: list[str] = []

    def _record(func, path, exc: BaseException) -> None:
        if isinstance(exc, FileNotFoundError):
            return
        msg = f"Cannot remove {path}: {exc}"
        logger.warning(msg)
        warnings.append(msg)

    if output_root.is_symlink() or output_root.is_file():
        try:
            output_root.unlink()
        except OSError as e:
            _record(os.unlink, output_root, e)
        return warnings

    if sys.version_info >= (3, 12):
        shutil.rmtree(output_root, onexc=_record)
    else:
        shutil.rmtree(output_root, onerror=lambda func, path, exc_info: _record(func, path, exc_info[1]))
    return warnings


def build(settings: Settings, project_root: Path) -> BuildResult:
    """Run one full content build under project_root.

    Raises ConfigurationError before anything is deleted or written when a
    configured path is unsafe.
    """
    root = os.path.abspath(project_root)
    source_root = resolve_safe_dir(root, settings.source_dir)
    output_root = resolve_safe_dir(root, settings.output_dir)
    public_root = resolve_safe_dir(root, settings.public_dir)
    assert_output_confinement(output_root, public_root)
    assert_disjoint(source_root, output_root)
    route_base = normalize_route_base(settings.route_base)

    clean_warnings: list[str] = []
    if settings.clean_output:
        logger.info("Cleaning %s", output_root)
        clean_warnings = clean_output_dir(Path(output_root))
    Path(output_root).mkdir(parents=True, exist_ok=True)

    prefix = sanitize_prefix(settings.prefix, DEFAULT_PREFIX)
    file_name = tree_file_name(prefix)
    index_path = Path(output_root) / file_name

    source_dir = to_posix(settings.source_dir).rstrip("/")
    output_dir = to_posix(settings.output_dir).rstrip("/")
    ctx = WalkContext(
        output_root=Path(output_root),
        source_dir=source_dir,
        output_dir=output_dir,
        route_base=route_base,
        root_name=root_name(source_dir),
    )
    logger.info("Walking %s -> %s", source_root, output_root)
    result = walk(Path(source_root), ctx)
    warnings = clean_warnings + result.warnings

    envelope = IndexEnvelope(
        prefix=prefix,
        route_base=route_base,
        source_dir=source_dir,
        output_dir=output_dir,
        generated_at=utc_timestamp(),
        tree_url_path=to_url_path(route_base, file_name),
        tree=result.tree,
    )
    ensure_parent_dir(index_path)
    index_path.write_text(dump_json(envelope), encoding="utf-8", newline="\n")
    logger.info(
        "Wrote %s (%d markdown, %d files, %d warnings)",
        index_path, result.markdown_count, result.file_count, len(warnings),
    )

    return BuildResult(
        envelope=envelope,
        index_path=index_path,
        warnings=warnings,
        markdown_count=result.markdown_count,
        file_count=result.file_count,
    )
