"""Filesystem-backed source trees.

LocalSourceTree serves a checked-out repository directory;
MemorySourceTree serves a dict of path -> content (stdin mode, tests).
Both refuse paths that would escape the tree root.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional, Union

from plugincheck.errors import FetchError
from plugincheck.source.types import FetchResult, normalize_path

logger = logging.getLogger(__name__)

# Directories never enumerated by list_files()
SKIP_DIRS = {
    "node_modules", ".git", ".hg", ".svn", "__pycache__", ".venv",
    ".next", "coverage", ".nyc_output",
}


class LocalSourceTree:
    """Serve files from a directory on disk."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()

    def __repr__(self) -> str:
        return f"LocalSourceTree({str(self.root)!r})"

    def fetch(self, path: str) -> FetchResult:
        rel = normalize_path(path)
        if rel is None:
            logger.debug("Refusing path outside tree: %s", path)
            return FetchResult.missing()

        try:
            target = (self.root / rel).resolve()
            # Symlinks may still point outside the root after normalisation
            if not target.is_relative_to(self.root):
                logger.debug("Refusing symlinked path outside tree: %s", path)
                return FetchResult.missing()
            if not target.is_file():
                return FetchResult.missing()
            return FetchResult(content=target.read_bytes(), exists=True)
        except (OSError, ValueError) as exc:
            raise FetchError(f"read [{rel}] failed: {exc}", path=rel, cause=exc) from exc

    def list_files(self) -> Optional[list[str]]:
        """Collect every file below the root, skipping vendored/VCS dirs."""
        files: list[str] = []

        for path in self.root.rglob("*"):
            rel_parts = path.relative_to(self.root).parts
            if any(part in SKIP_DIRS for part in rel_parts):
                continue
            if not path.is_file():
                continue
            files.append("/".join(rel_parts))

        return sorted(files)


class MemorySourceTree:
    """Serve files from an in-memory mapping."""

    def __init__(self, files: Mapping[str, Union[str, bytes]]):
        self._files: dict[str, bytes] = {}
        for path, content in files.items():
            rel = normalize_path(path)
            if rel is None:
                raise ValueError(f"Invalid tree path: {path!r}")
            self._files[rel] = content.encode("utf-8") if isinstance(content, str) else content

    def __repr__(self) -> str:
        return f"MemorySourceTree({len(self._files)} files)"

    def fetch(self, path: str) -> FetchResult:
        rel = normalize_path(path)
        if rel is None or rel not in self._files:
            return FetchResult.missing()
        return FetchResult(content=self._files[rel], exists=True)

    def list_files(self) -> Optional[list[str]]:
        return sorted(self._files)
