"""Compiler-style file matching and module resolution.

Three pieces the project graph needs:

  - tsconfig include/exclude globs ("src/**/*", "src", "test/*.spec.ts")
  - import specifiers in a syntax tree (import/export-from, require,
    dynamic import, TypeScript import-equals)
  - specifier -> file resolution (relative, compilerOptions.paths,
    compilerOptions.baseUrl, extension and index probing)

Bare package specifiers ("react", "siyuan") resolve to nothing: vendored
dependencies are never part of the analysed program.
"""

import logging
import posixpath
import re
from typing import Iterator, Optional

import tree_sitter

from plugincheck.detector.types import BuildConfig
from plugincheck.scanner.types import SyntaxTree
from plugincheck.source.types import SourceTree, file_exists, normalize_path

logger = logging.getLogger(__name__)

VENDOR_DIR = "node_modules"

TS_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts")
JS_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs")

# Probe order when a specifier has no usable extension.
RESOLUTION_EXTENSIONS = (".ts", ".tsx", ".d.ts", ".js", ".jsx", ".mjs", ".cjs", ".mts", ".cts")

# "./util.js" in TypeScript sources usually means "./util.ts".
_JS_TO_TS: dict[str, tuple[str, ...]] = {
    ".js": (".ts", ".tsx", ".d.ts"),
    ".jsx": (".tsx",),
    ".mjs": (".mts", ".d.mts"),
    ".cjs": (".cts", ".d.cts"),
}

# foo.d.ts, foo.d.mts, foo.d.cts, and arbitrary-extension foo.d.css.ts
_DECLARATION_PATTERN = re.compile(r"\.d(?:\.[^/]+)?\.[mc]?ts$")


def is_declaration_file(path: str) -> bool:
    return bool(_DECLARATION_PATTERN.search(path))


def is_vendored(path: str) -> bool:
    return VENDOR_DIR in path.replace("\\", "/").split("/")


# ---------------------------------------------------------------------------
# tsconfig globs
# ---------------------------------------------------------------------------


def _implicit_directory(pattern: str) -> str:
    """'src' means 'src/**/*'; a last segment with '.', '*' or '?' is literal."""
    last = pattern.rsplit("/", 1)[-1]
    if any(ch in last for ch in ".*?"):
        return pattern
    return f"{pattern}/**/*" if pattern else "**/*"


def glob_to_regex(pattern: str, prefix_match: bool = False) -> re.Pattern:
    """Compile a tsconfig glob to a regex over tree-relative paths.

    prefix_match=True also matches everything below a matching directory
    (exclude semantics).
    """
    cleaned = pattern.replace("\\", "/")
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]
    cleaned = cleaned.rstrip("/")
    if cleaned == ".":
        cleaned = ""
    if not prefix_match:
        cleaned = _implicit_directory(cleaned)

    parts: list[str] = []
    segments = cleaned.split("/")
    for index, segment in enumerate(segments):
        is_last = index == len(segments) - 1
        if segment == "**":
            parts.append("(?:.*/)?" if not is_last else ".*")
            continue
        translated = "".join(
            "[^/]*" if ch == "*" else "[^/]" if ch == "?" else re.escape(ch)
            for ch in segment
        )
        parts.append(translated if is_last else translated + "/")

    body = "".join(parts)
    suffix = "(?:/.*)?" if prefix_match else ""
    return re.compile(f"^{body}{suffix}$")


def match_include(
    files: list[str],
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    allow_js: bool = False,
) -> list[str]:
    """Return files selected by include globs minus exclude globs, sorted."""
    extensions = TS_EXTENSIONS + (JS_EXTENSIONS if allow_js else ())
    include_res = [glob_to_regex(p) for p in include]
    exclude_res = [glob_to_regex(p, prefix_match=True) for p in exclude]

    matched: list[str] = []
    for path in files:
        if not path.endswith(extensions) or is_vendored(path):
            continue
        if not any(rx.match(path) for rx in include_res):
            continue
        if any(rx.match(path) for rx in exclude_res):
            continue
        matched.append(path)
    return sorted(matched)


# ---------------------------------------------------------------------------
# Import extraction
# ---------------------------------------------------------------------------


def import_specifiers(syntax_tree: SyntaxTree) -> Iterator[str]:
    """Yield string-literal module specifiers in source order."""
    stack: list[tree_sitter.Node] = [syntax_tree.root]
    while stack:
        node = stack.pop()
        specifier = _specifier_of(node, syntax_tree)
        if specifier:
            yield specifier
        stack.extend(reversed(node.children))


def _specifier_of(node: tree_sitter.Node, syntax_tree: SyntaxTree) -> Optional[str]:
    if node.type in ("import_statement", "export_statement"):
        return _string_value(node.child_by_field_name("source"), syntax_tree)

    if node.type == "import_require_clause":
        # older grammars do not name the string child "source"
        source = node.child_by_field_name("source") or next(
            (child for child in node.named_children if child.type == "string"), None
        )
        return _string_value(source, syntax_tree)

    if node.type == "call_expression":
        function = node.child_by_field_name("function")
        if function is None:
            return None
        is_require = function.type == "identifier" and syntax_tree.text_of(function) == "require"
        if not (is_require or function.type == "import"):
            return None
        arguments = node.child_by_field_name("arguments")
        if arguments is None or not arguments.named_children:
            return None
        return _string_value(arguments.named_children[0], syntax_tree)

    return None


def _string_value(node: Optional[tree_sitter.Node], syntax_tree: SyntaxTree) -> Optional[str]:
    if node is None or node.type != "string":
        return None
    return syntax_tree.text_of(node)[1:-1] or None


# ---------------------------------------------------------------------------
# Module resolution
# ---------------------------------------------------------------------------


class ModuleResolver:
    """Resolve import specifiers to tree paths the way tsc would.

    Existence checks go through the listing when the tree is enumerable,
    otherwise through the tree's fetch. Results are cached per run.
    """

    def __init__(self, tree: SourceTree, config: BuildConfig, listing: Optional[list[str]] = None):
        self._tree = tree
        self._config = config
        self._listing = set(listing) if listing is not None else None
        self._exists_cache: dict[str, bool] = {}

    def resolve(self, specifier: str, importer: str) -> Optional[str]:
        for base in self._candidate_bases(specifier, importer):
            resolved = self._probe(base)
            if resolved is not None:
                return resolved
        return None

    def _candidate_bases(self, specifier: str, importer: str) -> list[str]:
        if specifier in (".", "..") or specifier.startswith(("./", "../")):
            return [posixpath.join(posixpath.dirname(importer), specifier)]
        if specifier.startswith("/") or ":" in specifier:
            # absolute paths and node:/http: style URLs
            return []

        bases: list[str] = []
        paths_root = self._config.base_url or "."
        for pattern, targets in self._config.paths:
            captured = _match_paths_pattern(pattern, specifier)
            if captured is None:
                continue
            for target in targets:
                bases.append(posixpath.join(paths_root, target.replace("*", captured, 1)))
        if self._config.base_url:
            bases.append(posixpath.join(self._config.base_url, specifier))
        return bases

    def _probe(self, base: str) -> Optional[str]:
        stem, ext = posixpath.splitext(base)
        candidates: list[str] = []
        if ext in _JS_TO_TS:
            candidates.extend(stem + replacement for replacement in _JS_TO_TS[ext])
        if ext in TS_EXTENSIONS or ext in JS_EXTENSIONS:
            candidates.append(base)
        candidates.extend(base + extension for extension in RESOLUTION_EXTENSIONS)
        candidates.extend(f"{base}/index{extension}" for extension in RESOLUTION_EXTENSIONS)

        for candidate in candidates:
            path = normalize_path(candidate)
            if path is not None and self._exists(path):
                return path
        return None

    def _exists(self, path: str) -> bool:
        if self._listing is not None:
            return path in self._listing
        if path not in self._exists_cache:
            self._exists_cache[path] = file_exists(self._tree, path)
        return self._exists_cache[path]


def _match_paths_pattern(pattern: str, specifier: str) -> Optional[str]:
    """Match a compilerOptions.paths key; return the '*' capture ('' if exact)."""
    if "*" not in pattern:
        return "" if pattern == specifier else None
    prefix, _, suffix = pattern.partition("*")
    if (
        specifier.startswith(prefix)
        and specifier.endswith(suffix)
        and len(specifier) >= len(prefix) + len(suffix)
    ):
        return specifier[len(prefix):len(specifier) - len(suffix)]
    return None
