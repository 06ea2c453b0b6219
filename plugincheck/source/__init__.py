"""Source-tree capability consumed by the analysis engine.

Public API:
    SourceTree (protocol), FetchResult
    LocalSourceTree(root), MemorySourceTree(files)
    RawFileSourceTree(owner, repo, ref, settings)
"""

from plugincheck.source.local import LocalSourceTree, MemorySourceTree
from plugincheck.source.remote import (
    RawFileSourceTree,
    build_file_preview_url,
    build_file_raw_url,
    build_repo_home_url,
)
from plugincheck.source.types import FetchResult, SourceTree, file_exists, normalize_path, try_fetch

__all__ = [
    "SourceTree",
    "FetchResult",
    "LocalSourceTree",
    "MemorySourceTree",
    "RawFileSourceTree",
    "build_file_raw_url",
    "build_file_preview_url",
    "build_repo_home_url",
    "file_exists",
    "normalize_path",
    "try_fetch",
]
