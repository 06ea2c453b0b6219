"""Parser front-end built on tree-sitter.

Turns JavaScript / TypeScript source into a SyntaxTree. Nothing is
executed and no module is resolved; the grammar is chosen from the file
extension alone.
"""

import logging
import posixpath

import tree_sitter
import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts

from plugincheck.errors import ParseError
from plugincheck.scanner.types import SyntaxTree

logger = logging.getLogger(__name__)

# Initialize languages once at module level
_JS_LANG = tree_sitter.Language(tsjs.language())
_TS_LANG = tree_sitter.Language(tsts.language_typescript())
_TSX_LANG = tree_sitter.Language(tsts.language_tsx())

_LANGUAGES: dict[str, tree_sitter.Language] = {
    "javascript": _JS_LANG,
    "typescript": _TS_LANG,
    "tsx": _TSX_LANG,
}

# File extension to dialect. Unknown extensions parse as JavaScript,
# whose grammar also accepts JSX.
_DIALECT_MAP: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

_UTF8_BOM = b"\xef\xbb\xbf"


def dialect_for(path: str) -> str:
    """Return the grammar dialect implied by a file name."""
    suffix = posixpath.splitext(path)[1].lower()
    return _DIALECT_MAP.get(suffix, "javascript")


def parse_source(path: str, content: bytes | str) -> SyntaxTree:
    """Parse one file into a SyntaxTree.

    Raises:
        ParseError: If the content is not UTF-8 or the tree contains
            syntax errors. The message names the first error location.
    """
    source = content.encode("utf-8") if isinstance(content, str) else content
    if source.startswith(_UTF8_BOM):
        source = source[len(_UTF8_BOM):]

    try:
        source.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"{path}: source is not valid UTF-8: {exc}", path=path, cause=exc) from exc

    dialect = dialect_for(path)
    parser = tree_sitter.Parser(_LANGUAGES[dialect])
    syntax_tree = SyntaxTree(path=path, dialect=dialect, source=source, tree=parser.parse(source))

    if syntax_tree.root.has_error:
        error_node = _first_error(syntax_tree.root)
        position = syntax_tree.position_of(error_node or syntax_tree.root)
        raise ParseError(
            f"{path}:{position.line}:{position.column}: syntax error ({dialect})",
            path=path,
            line=position.line,
            column=position.column,
        )

    logger.debug("Parsed %s as %s (%d bytes)", path, dialect, len(source))
    return syntax_tree


def _first_error(root: tree_sitter.Node) -> tree_sitter.Node | None:
    """Find the first ERROR or MISSING node in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        # Only subtrees flagged has_error can contain one
        stack.extend(child for child in reversed(node.children) if child.has_error or child.is_missing)
    return None
