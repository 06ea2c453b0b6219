"""Types for the source-tree capability.

A SourceTree is the engine's only window onto a plugin repository:
fetch a path, optionally enumerate files. Implementations are
filesystem-backed, network-backed, or in-memory; the engine never
knows which.
"""

import logging
import posixpath
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from plugincheck.errors import FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a single fetch.

    exists=False means the tree answered authoritatively that the path is
    absent (missing file, HTTP 404). Failures to get an answer at all raise
    FetchError instead.
    """

    content: bytes
    exists: bool

    @classmethod
    def missing(cls) -> "FetchResult":
        return cls(content=b"", exists=False)


@runtime_checkable
class SourceTree(Protocol):
    """Read-only view of one repository snapshot."""

    def fetch(self, path: str) -> FetchResult:
        """Return the file at `path` (relative, forward slashes).

        Raises:
            FetchError: When the tree cannot answer (I/O error, non-2xx
                response, retry or fetch budget exhausted).
        """
        ...  # noqa: PLR6301

    def list_files(self) -> Optional[list[str]]:
        """Return every file path in the tree, or None if not enumerable."""
        ...  # noqa: PLR6301


def normalize_path(path: str) -> Optional[str]:
    """Normalise a tree-relative path; None when it escapes the tree.

    Backslashes become forward slashes and leading "./" segments are
    dropped, so "./src\\index.ts" and "src/index.ts" address the same file.
    Paths containing NUL never name a file.
    """
    if not path or "\0" in path:
        return None
    cleaned = path.replace("\\", "/")
    if cleaned.startswith("/"):
        return None
    cleaned = posixpath.normpath(cleaned)
    if cleaned in (".", "") or cleaned == ".." or cleaned.startswith("../"):
        return None
    return cleaned


def try_fetch(tree: SourceTree, path: str) -> Optional[bytes]:
    """Fetch `path`, treating absence and fetch failures alike as None."""
    try:
        result = tree.fetch(path)
    except FetchError as exc:
        logger.debug("Fetch of %s failed, treating as absent: %s", path, exc)
        return None
    if not result.exists:
        return None
    return result.content


def file_exists(tree: SourceTree, path: str) -> bool:
    return try_fetch(tree, path) is not None
