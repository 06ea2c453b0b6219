"""Scanner module for parsing source and locating the lifecycle hook.

Public API:
    parse_source(path, content) -> SyntaxTree
    find_hook(trees, name) -> SourcePosition | None
    find_hook_in_text(path, content, name) -> SourcePosition | None
"""

from plugincheck.scanner.heuristics import find_hook_in_text
from plugincheck.scanner.hook_detector import HOOK_NAME, find_hook, find_hook_in_tree
from plugincheck.scanner.parser import dialect_for, parse_source
from plugincheck.scanner.types import SourcePosition, SyntaxTree

__all__ = [
    "HOOK_NAME",
    "parse_source",
    "dialect_for",
    "find_hook",
    "find_hook_in_tree",
    "find_hook_in_text",
    "SourcePosition",
    "SyntaxTree",
]
