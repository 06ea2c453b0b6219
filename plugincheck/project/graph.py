"""Project graph builder: expands an entry file into the program's file set.

Flow:
1. Without a tsconfig.json that names program files ("files" and/or
   "include"), the program is the entry file alone.
2. Otherwise the roots are the entry file, then "files" in declared order,
   then every listed file matched by "include" minus "exclude" (sorted).
3. Import edges are followed breadth-first from the roots.
4. Declaration-only files and node_modules paths never become members.

Ancillary files (everything but the entry) that cannot be fetched or
parsed are skipped and recorded; they never fail the run.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, Optional

from plugincheck.detector.types import BuildConfig
from plugincheck.errors import FetchError, ParseError
from plugincheck.project.resolution import (
    ModuleResolver,
    import_specifiers,
    is_declaration_file,
    is_vendored,
    match_include,
)
from plugincheck.scanner.parser import parse_source
from plugincheck.scanner.types import SyntaxTree
from plugincheck.source.types import SourceTree, normalize_path

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILES = 200
DEFAULT_MAX_FILE_SIZE = 1024 * 1024


@dataclass(frozen=True)
class SkippedFile:
    """A candidate that did not make it into the program set."""

    path: str
    reason: str

    def to_dict(self) -> dict:
        return {"path": self.path, "reason": self.reason}


@dataclass
class ProjectFileSet:
    """Ordered program members with their parsed trees.

    files: member paths in visiting order; the entry file comes first.
    trees: parsed tree for every member.
    skipped: candidates dropped (declaration, vendored, unreadable, cap).
    """

    files: list[str] = field(default_factory=list)
    trees: dict[str, SyntaxTree] = field(default_factory=dict)
    skipped: list[SkippedFile] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, path: object) -> bool:
        return path in self.trees

    def ordered_trees(self) -> Iterator[SyntaxTree]:
        for path in self.files:
            yield self.trees[path]

    def to_dict(self) -> dict:
        return {
            "files": list(self.files),
            "skipped": [s.to_dict() for s in self.skipped],
        }


def build_project_files(
    tree: SourceTree,
    config: BuildConfig,
    entry_tree: SyntaxTree,
    max_files: int = DEFAULT_MAX_FILES,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
) -> ProjectFileSet:
    """Expand the already-parsed entry file into the program file set."""
    return ProjectGraphBuilder(tree, config, max_files, max_file_size).build(entry_tree)


class ProjectGraphBuilder:
    """Single-use builder; one instance per analysis run."""

    def __init__(
        self,
        tree: SourceTree,
        config: BuildConfig,
        max_files: int = DEFAULT_MAX_FILES,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ):
        self._tree = tree
        self._config = config
        self._max_files = max_files
        self._max_file_size = max_file_size
        self._seen: set[str] = set()
        self._queue: deque[str] = deque()
        self._result = ProjectFileSet()

    def build(self, entry_tree: SyntaxTree) -> ProjectFileSet:
        entry = normalize_path(entry_tree.path) or entry_tree.path
        self._admit(entry)

        if not self._config.declares_membership:
            logger.info("No program membership rules; analysing %s only", entry)
            if self._queue:
                self._queue.clear()
                self._add_member(entry_tree)
            return self._result

        listing = self._tree.list_files()
        for path in self._config.explicit_files:
            self._admit(path)
        if self._config.include_patterns:
            if listing is None:
                logger.info("Tree cannot enumerate files; include globs contribute nothing")
            else:
                for path in match_include(
                    listing,
                    self._config.include_patterns,
                    self._config.exclude_patterns,
                    allow_js=self._config.allow_js,
                ):
                    self._admit(path)

        resolver = ModuleResolver(self._tree, self._config, listing)
        while self._queue:
            path = self._queue.popleft()
            if len(self._result.files) >= self._max_files:
                self._skip(path, f"project file cap of {self._max_files} reached")
                continue

            syntax_tree = entry_tree if path == entry else self._load(path)
            if syntax_tree is None:
                continue
            self._add_member(syntax_tree)

            for specifier in import_specifiers(syntax_tree):
                resolved = resolver.resolve(specifier, path)
                if resolved is not None:
                    self._admit(resolved)

        logger.info(
            "Project set: %d files, %d skipped",
            len(self._result.files), len(self._result.skipped),
        )
        return self._result

    def _admit(self, raw_path: str) -> None:
        path = normalize_path(raw_path)
        if path is None or path in self._seen:
            return
        self._seen.add(path)

        if is_vendored(path):
            self._skip(path, "vendored dependency")
            return
        if is_declaration_file(path):
            self._skip(path, "declaration-only file")
            return
        self._queue.append(path)

    def _add_member(self, syntax_tree: SyntaxTree) -> None:
        self._result.files.append(syntax_tree.path)
        self._result.trees[syntax_tree.path] = syntax_tree

    def _skip(self, path: str, reason: str) -> None:
        logger.debug("Skipping %s: %s", path, reason)
        self._result.skipped.append(SkippedFile(path=path, reason=reason))

    def _load(self, path: str) -> Optional[SyntaxTree]:
        """Fetch and parse an ancillary file; None (and a note) on failure."""
        try:
            result = self._tree.fetch(path)
        except FetchError as exc:
            self._skip(path, f"fetch failed: {exc}")
            return None
        if not result.exists:
            self._skip(path, "not found")
            return None
        if len(result.content) > self._max_file_size:
            self._skip(path, f"larger than {self._max_file_size} bytes")
            return None

        try:
            return parse_source(path, result.content)
        except ParseError as exc:
            self._skip(path, f"parse failed: {exc}")
            return None
