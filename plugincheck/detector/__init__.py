"""Detector module for build configuration and entry-file resolution.

Public API:
    load_build_config(tree) -> BuildConfig
    resolve_entry(tree, config, fallback) -> EntryResolution
    resolve_entry_file(tree, config, fallback) -> str
"""

from plugincheck.detector.build_config import load_build_config
from plugincheck.detector.entry import (
    DEFAULT_ENTRY_FILE,
    EntryResolution,
    EntrySource,
    resolve_entry,
    resolve_entry_file,
)
from plugincheck.detector.jsonc import parse_jsonc, strip_json_comments
from plugincheck.detector.types import BuildConfig

__all__ = [
    "load_build_config",
    "resolve_entry",
    "resolve_entry_file",
    "EntryResolution",
    "EntrySource",
    "DEFAULT_ENTRY_FILE",
    "parse_jsonc",
    "strip_json_comments",
    "BuildConfig",
]
