"""Blog read layer: list post summaries from the index envelope and load single posts

Nothing here raises for missing or malformed content. A broken index yields an
empty list, a broken post yields None, and the cause is logged.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, assert_never

from dateutil import parser as date_parser
from pydantic import ValidationError

from mdtree.config import Settings
from mdtree.core.build import DEFAULT_PREFIX, tree_file_name
from mdtree.core.errors import MdtreeError, ParseError, TransientReadError
from mdtree.core.models import (
    BlogPost,
    BlogPostSummary,
    BlogRouteInfo,
    DirNode,
    FileNode,
    IndexEnvelope,
    MarkdownNode,
    ValidationResult,
)
from mdtree.core.paths import resolve_safe_dir, sanitize_prefix


logger = logging.getLogger(__name__)

BLOG_ROUTE = "/blog"
MAX_TITLE_LEN = 100
MAX_DESCRIPTION_LEN = 160


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a date or timestamp string; naive values are taken as UTC. None if unparseable.

    ISO-8601 is tried first, then the looser forms such as 2025/03/01 or March 1, 2025.
    """
    if not value or not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        dt = date_parser.isoparse(text)
    except (ValueError, OverflowError, TypeError):
        try:
            dt = date_parser.parse(text)
        except (ValueError, OverflowError, TypeError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def slug_from_name(name: str) -> str:
    """hello.md -> hello"""
    return name[:-3] if name.lower().endswith(".md") else name


def is_safe_slug(slug: str) -> bool:
    return bool(slug) and slug not in (".", "..") and "/" not in slug and "\\" not in slug and "\0" not in slug


def sort_by_date_desc(items: list, key) -> list:
    """Newest first. Unparseable dates go last; ties keep their incoming order."""
    def _key(item):
        dt = parse_date(key(item))
        return (dt is None, -dt.timestamp() if dt else 0.0)
    return sorted(items, key=_key)


def validate_blog_post(post: Any) -> ValidationResult:
    """Check the fields a blog post artifact must carry; add advisory warnings."""
    result = ValidationResult()
    if not isinstance(post, dict):
        result.errors.append("Blog post must be an object")
        return result

    for name in ("title", "date", "description", "content"):
        if not post.get(name) or not isinstance(post[name], str):
            result.errors.append(f"{name.capitalize()} is required and must be a string")
    if isinstance(post.get("date"), str) and post["date"] and parse_date(post["date"]) is None:
        result.errors.append("Date must be a valid date string")

    tags = post.get("tags")
    if not isinstance(tags, list):
        result.errors.append("Tags must be an array")
    elif any(not isinstance(t, str) for t in tags):
        result.errors.append("All tags must be strings")

    if post.get("cover") is not None and not isinstance(post["cover"], str):
        result.errors.append("Cover must be a string if provided")

    if isinstance(post.get("title"), str) and len(post["title"]) > MAX_TITLE_LEN:
        result.warnings.append(f"Title is longer than {MAX_TITLE_LEN} characters")
    if isinstance(post.get("description"), str) and len(post["description"]) > MAX_DESCRIPTION_LEN:
        result.warnings.append(f"Description is longer than {MAX_DESCRIPTION_LEN} characters")
    if isinstance(tags, list) and not tags:
        result.warnings.append("No tags provided")
    return result


def parse_blog_post(text: str, source: str = "<string>") -> BlogPost:
    """Parse and validate a blog post artifact. Raises ParseError."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"{source}: invalid JSON: {e}") from e

    result = validate_blog_post(data)
    if not result.is_valid:
        raise ParseError(f"{source}: invalid blog post: {'; '.join(result.errors)}")
    for warning in result.warnings:
        logger.warning("%s: %s", source, warning)

    try:
        return BlogPost.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"{source}: {e}") from e


class BlogReader:
    """Read-only view over one build's index envelope and blog artifacts."""

    def __init__(
        self,
        project_root: Path,
        output_dir: str = "public/content",
        prefix: str = DEFAULT_PREFIX,
        blog_dir: str = "blog",
        ):
        self.output_root = Path(resolve_safe_dir(str(project_root), output_dir))
        self.index_path = self.output_root / tree_file_name(sanitize_prefix(prefix, DEFAULT_PREFIX))
        self.blog_dir = blog_dir

    @classmethod
    def from_settings(cls, settings: Settings, project_root: Path) -> "BlogReader":
        return cls(project_root, settings.output_dir, settings.prefix, settings.blog_dir)

    def load_index(self) -> Optional[IndexEnvelope]:
        """Parsed envelope, or None if the index is missing or invalid."""
        try:
            text = self.index_path.read_text(encoding="utf-8")
            return IndexEnvelope.model_validate_json(text)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read index %s: %s", self.index_path, e)
        except ValidationError as e:
            logger.warning("Invalid index %s: %s", self.index_path, e)
        return None

    def _post_nodes(self) -> list[MarkdownNode]:
        """Markdown children of the top-level blog directory, in tree order."""
        envelope = self.load_index()
        if envelope is None:
            return []
        blog = next(
            (c for c in envelope.tree.children if isinstance(c, DirNode) and c.name == self.blog_dir),
            None,
        )
        if blog is None or not blog.children:
            return []

        posts: list[MarkdownNode] = []
        for node in blog.children:
            match node:
                case MarkdownNode():
                    posts.append(node)
                case DirNode() | FileNode():
                    continue
                case _:
                    assert_never(node)
        return posts

    def list_summaries(self) -> list[BlogPostSummary]:
        """Blog post summaries, newest first."""
        summaries = []
        for node in self._post_nodes():
            slug = slug_from_name(node.name)
            meta = node.meta
            summaries.append(BlogPostSummary(
                slug=slug,
                title=meta.title or "",
                date=meta.date or "",
                description=meta.description or "",
                tags=meta.tags or [],
                cover=meta.cover,
                to=f"{BLOG_ROUTE}/{slug}",
            ))
        return sort_by_date_desc(summaries, key=lambda s: s.date)

    def list_routes(self) -> list[BlogRouteInfo]:
        """Routes for static generation, ordered like list_summaries."""
        routes = []
        for node in self._post_nodes():
            slug = slug_from_name(node.name)
            routes.append(BlogRouteInfo(
                slug=slug,
                json_path=node.output_path,
                url_path=f"{BLOG_ROUTE}/{slug}",
                metadata=node.meta,
            ))
        return sort_by_date_desc(routes, key=lambda r: r.metadata.date)

    def post_path(self, slug: str) -> Path:
        return self.output_root / self.blog_dir / f"{slug}.json"

    def read_one(self, slug: str) -> Optional[BlogPost]:
        """Load and validate one post by slug. None if missing, malformed, or invalid."""
        if not is_safe_slug(slug):
            logger.warning("Rejected blog slug %r", slug)
            return None
        path = self.post_path(slug)
        try:
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise TransientReadError(f"Cannot read blog post {path}: {e}", path) from e
            return parse_blog_post(text, source=str(path))
        except MdtreeError as e:
            logger.warning("Failed to read blog post %s: %s", slug, e)
            return None
