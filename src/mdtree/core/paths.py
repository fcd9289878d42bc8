"""Path policy: confine configured directories to the project root and normalize routes

All checks here are lexical. Nothing in this module touches the filesystem, so a
rejected configuration is reported before any read, write, or delete happens.
"""

import ntpath
import os
import posixpath
import re

from mdtree.core.errors import ConfigurationError


_PREFIX_RE = re.compile(r"[^A-Za-z0-9_-]+")


def to_posix(path: str) -> str:
    """Replace Windows separators with forward slashes."""
    return path.replace("\\", "/")


def _is_absolute(path: str) -> bool:
    return os.path.isabs(path) or posixpath.isabs(to_posix(path)) or ntpath.isabs(path)


def is_within(base_abs: str, target_abs: str) -> bool:
    """True if target_abs is a strict descendant of base_abs."""
    rel = os.path.relpath(target_abs, base_abs)
    if rel in ("", ".") or os.path.isabs(rel):
        return False
    return rel != os.pardir and not rel.startswith(os.pardir + os.sep)


def resolve_safe_dir(root: str, relative_path: str) -> str:
    """Resolve relative_path against root, refusing absolute paths and escapes from root."""
    if not relative_path or not relative_path.strip():
        raise ConfigurationError("Directory path is required")
    if _is_absolute(relative_path):
        raise ConfigurationError(f"Absolute paths are not allowed: {relative_path}")

    root_abs = os.path.abspath(root)
    target = os.path.normpath(os.path.join(root_abs, relative_path))
    if not is_within(root_abs, target):
        raise ConfigurationError(f"Path must be within project root: {relative_path}")
    return target


def assert_output_confinement(output_abs: str, public_root_abs: str) -> None:
    """Raise unless output_abs sits strictly inside public_root_abs."""
    output_abs = os.path.normpath(output_abs)
    public_root_abs = os.path.normpath(public_root_abs)
    if output_abs == public_root_abs:
        raise ConfigurationError(f"Output directory must not be the public root: {output_abs}")
    if not is_within(public_root_abs, output_abs):
        raise ConfigurationError(f"Output directory must be inside {public_root_abs}: {output_abs}")


def sanitize_prefix(prefix: str, default: str = "rei") -> str:
    """Keep [A-Za-z0-9_-]; collapse each other run of characters into '_'."""
    cleaned = _PREFIX_RE.sub("_", (prefix or "").strip())
    return cleaned or default


def normalize_route_base(route_base: str, default: str = "/content") -> str:
    """Leading '/', no trailing '/' except for the root route."""
    value = (route_base or "").strip() or default
    if not value.startswith("/"):
        value = f"/{value}"
    return value.rstrip("/") or "/"


def to_url_path(route_base: str, rel_posix: str) -> str:
    """Join a route base and a relative POSIX path into a served URL path."""
    rel = rel_posix.lstrip("/")
    if not rel:
        return route_base
    if route_base == "/":
        return f"/{rel}"
    return f"{route_base}/{rel}"


def join_posix(base: str, rel_posix: str) -> str:
    """Join a configured directory (as written) with a relative POSIX path."""
    base = to_posix(base).rstrip("/")
    return f"{base}/{rel_posix}" if base else rel_posix


def assert_disjoint(source_abs: str, output_abs: str) -> None:
    """Raise if the source and output trees overlap in either direction."""
    source_abs = os.path.normpath(source_abs)
    output_abs = os.path.normpath(output_abs)
    if source_abs == output_abs or is_within(output_abs, source_abs) or is_within(source_abs, output_abs):
        raise ConfigurationError(f"Source and output directories must not overlap: {source_abs}, {output_abs}")
