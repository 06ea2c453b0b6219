"""Entry-file resolver.

Infers the file a plugin's build starts from, without running anything.

Resolution order (first match wins, strategies never combine):
  1. tsconfig.json "files"   -> files[0], verbatim
  2. tsconfig.json "include" -> <dir>/index.ts, then <dir>/main.ts, where
                                <dir> is the first pattern cut at its first
                                wildcard; the first candidate that exists
  3. package.json "main"     -> verbatim
  4. fallback                -> index.js
"""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from plugincheck.detector.build_config import load_build_config
from plugincheck.detector.types import BuildConfig
from plugincheck.source.types import SourceTree, file_exists

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_FILE = "index.js"

# Probed in order under the include directory.
INCLUDE_ENTRY_CANDIDATES = ("index.ts", "main.ts")

_GLOB_CHARS = "*?{"


class EntrySource(StrEnum):
    """Which resolution step produced the entry file."""

    TSCONFIG_FILES = "tsconfig_files"
    TSCONFIG_INCLUDE = "tsconfig_include"
    PACKAGE_MAIN = "package_main"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class EntryResolution:
    path: str
    source: EntrySource

    @property
    def is_fallback(self) -> bool:
        return self.source == EntrySource.FALLBACK


def resolve_entry(
    tree: SourceTree,
    config: Optional[BuildConfig] = None,
    fallback: str = DEFAULT_ENTRY_FILE,
) -> EntryResolution:
    """Resolve the entry file and report the step that chose it.

    Never raises: unreadable or missing configuration degrades to the
    next strategy and ultimately to `fallback`.
    """
    if config is None:
        config = load_build_config(tree)

    if config.explicit_files:
        entry = config.explicit_files[0]
        logger.info("Entry file %s (tsconfig.json files[0])", entry)
        return EntryResolution(entry, EntrySource.TSCONFIG_FILES)

    if config.include_patterns:
        directory = include_root(config.include_patterns[0])
        if directory:
            for name in INCLUDE_ENTRY_CANDIDATES:
                candidate = f"{directory}/{name}"
                if file_exists(tree, candidate):
                    logger.info("Entry file %s (tsconfig.json include)", candidate)
                    return EntryResolution(candidate, EntrySource.TSCONFIG_INCLUDE)
            logger.debug("No entry candidate under include root %s", directory)

    if config.main_field:
        logger.info("Entry file %s (package.json main)", config.main_field)
        return EntryResolution(config.main_field, EntrySource.PACKAGE_MAIN)

    logger.info("Entry file %s (fallback)", fallback)
    return EntryResolution(fallback, EntrySource.FALLBACK)


def resolve_entry_file(
    tree: SourceTree,
    config: Optional[BuildConfig] = None,
    fallback: str = DEFAULT_ENTRY_FILE,
) -> str:
    """Return the most probable entry file of the tree."""
    return resolve_entry(tree, config, fallback).path


def include_root(pattern: str) -> str:
    """Strip the wildcard suffix of an include pattern.

    "src/**/*" -> "src", "./src/" -> "src", "**/*.ts" -> "".
    """
    cut = len(pattern)
    for char in _GLOB_CHARS:
        idx = pattern.find(char)
        if 0 <= idx < cut:
            cut = idx
    directory = pattern[:cut].rstrip("/\\")
    while directory.startswith("./"):
        directory = directory[2:]
    return directory
