"""Content walker: mirror a source directory into the output tree and build the node tree

Traversal uses an explicit stack, so tree depth is not bounded by the interpreter's
recursion limit. Each directory writes only into its own mirrored output directory.
Siblings are emitted in name order (plain code point comparison of str, identical
on every run and platform).
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from mdtree.core.errors import ParseError, TransientReadError
from mdtree.core.frontmatter import load_frontmatter, match_frontmatter, normalize, normalize_newlines
from mdtree.core.models import DirNode, DocArtifact, DocMeta, FileNode, MarkdownNode, dump_json
from mdtree.core.paths import join_posix, to_url_path


logger = logging.getLogger(__name__)

MARKDOWN_EXT = ".md"
ARTIFACT_EXT = ".json"


@dataclass(frozen=True)
class WalkContext:
    """Roots and route settings shared by every node of one walk."""
    output_root: Path       # absolute output directory
    source_dir: str         # configured source dir, POSIX, used in sourcePath
    output_dir: str         # configured output dir, POSIX, used in outputPath
    route_base: str
    root_name: str = "content"


@dataclass
class WalkResult:
    tree: DirNode
    warnings: list[str] = field(default_factory=list)
    markdown_count: int = 0
    file_count: int = 0


def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def scan_dir(path: Path) -> list[os.DirEntry]:
    """Return the entries of path sorted by name. Raises TransientReadError if unreadable."""
    try:
        with os.scandir(path) as it:
            entries = list(it)
    except OSError as e:
        raise TransientReadError(f"Cannot read directory {path}: {e}", path) from e
    return sorted(entries, key=lambda e: e.name)


def artifact_rel_path(rel_posix: str) -> str:
    """blog/hello.md -> blog/hello.json; the trailing .md may be any case."""
    return rel_posix[: -len(MARKDOWN_EXT)] + ARTIFACT_EXT


def read_markdown(path: Path) -> tuple[DocMeta, str, list[str]]:
    """Read a markdown file into (meta, body, warnings).

    Malformed front matter degrades to empty metadata for this document only.
    Raises TransientReadError if the file itself cannot be read.
    """
    try:
        raw = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise TransientReadError(f"Cannot read {path}: {e}", path) from e

    block, body = match_frontmatter(normalize_newlines(raw))
    try:
        return normalize(load_frontmatter(block)), body, []
    except ParseError as e:
        return DocMeta(), body, [f"{path}: {e}; using empty metadata"]


def _emit_markdown(abs_path: Path, name: str, rel: str, ctx: WalkContext, result: WalkResult) -> MarkdownNode:
    meta, body, warnings = read_markdown(abs_path)
    for msg in warnings:
        logger.warning(msg)
    result.warnings.extend(warnings)

    out_rel = artifact_rel_path(rel)
    out_abs = ctx.output_root / out_rel
    ensure_parent_dir(out_abs)
    artifact = DocArtifact(**meta.model_dump(), content=body)
    out_abs.write_text(dump_json(artifact), encoding="utf-8", newline="\n")
    logger.debug("md %s -> %s", rel, out_rel)

    return MarkdownNode(
        name=name,
        path=rel,
        source_path=join_posix(ctx.source_dir, rel),
        output_path=join_posix(ctx.output_dir, out_rel),
        url_path=to_url_path(ctx.route_base, out_rel),
        meta=meta,
    )


def _emit_file(abs_path: Path, name: str, rel: str, ctx: WalkContext) -> FileNode:
    out_abs = ctx.output_root / rel
    ensure_parent_dir(out_abs)
    shutil.copyfile(abs_path, out_abs)
    logger.debug("file %s", rel)

    return FileNode(
        name=name,
        path=rel,
        source_path=join_posix(ctx.source_dir, rel),
        output_path=join_posix(ctx.output_dir, rel),
        url_path=to_url_path(ctx.route_base, rel),
    )


def walk(source_root: Path, ctx: WalkContext, rel_dir: str = "") -> WalkResult:
    """Mirror source_root into ctx.output_root and return the Dir node tree.

    Unreadable directories count as empty; unreadable or unwritable files are
    skipped. Both are logged and recorded in WalkResult.warnings.
    """
    name = rel_dir.rsplit("/", 1)[-1] if rel_dir else ctx.root_name
    root = DirNode(name=name, path=rel_dir)
    result = WalkResult(tree=root)

    stack: list[tuple[Path, str, DirNode]] = [(Path(source_root), rel_dir, root)]
    while stack:
        dir_abs, dir_rel, node = stack.pop()
        try:
            entries = scan_dir(dir_abs)
        except TransientReadError as e:
            logger.warning("%s; treating as empty", e)
            result.warnings.append(f"{e}; treating as empty")
            entries = []

        for entry in entries:
            abs_path = Path(entry.path)
            rel = f"{dir_rel}/{entry.name}" if dir_rel else entry.name
            try:
                if entry.is_dir(follow_symlinks=False):
                    child = DirNode(name=entry.name, path=rel)
                    node.children.append(child)
                    stack.append((abs_path, rel, child))
                elif os.path.splitext(entry.name)[1].lower() == MARKDOWN_EXT:
                    node.children.append(_emit_markdown(abs_path, entry.name, rel, ctx, result))
                    result.markdown_count += 1
                else:
                    node.children.append(_emit_file(abs_path, entry.name, rel, ctx))
                    result.file_count += 1
            except (OSError, TransientReadError) as e:
                msg = f"Skipping {rel}: {e}"
                logger.warning(msg)
                result.warnings.append(msg)

        node.children.sort(key=lambda c: c.name)

    return result
