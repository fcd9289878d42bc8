"""Error taxonomy for the content build and the blog read layer"""

from pathlib import Path
from typing import Optional


class MdtreeError(Exception):
    """Base class for all mdtree errors."""


class ConfigurationError(MdtreeError):
    """Unsafe or invalid path/route configuration. Fatal: aborts the build before any write."""


class TransientReadError(MdtreeError):
    """A directory or file could not be read during the walk. Recovered locally."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ParseError(MdtreeError):
    """Malformed front matter or document JSON. Recovered locally."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path
