"""Types for the scanner module.

SyntaxTree wraps one parsed file; SourcePosition is where a hook was
found. Both are immutable once built.
"""

from dataclasses import dataclass

import tree_sitter


@dataclass(frozen=True)
class SourcePosition:
    """A 1-based line/column location inside a tree file.

    column counts characters from the start of the line, not bytes.
    """

    file: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"

    def to_dict(self) -> dict:
        return {"file": self.file, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class SyntaxTree:
    """A tree-sitter tree tagged with the path it was parsed from.

    dialect: "javascript", "typescript" or "tsx".
    """

    path: str
    dialect: str
    source: bytes
    tree: tree_sitter.Tree

    @property
    def root(self) -> tree_sitter.Node:
        return self.tree.root_node

    def position_of(self, node: tree_sitter.Node) -> SourcePosition:
        """Return the 1-based position of a node's first character."""
        line_start = self.source.rfind(b"\n", 0, node.start_byte) + 1
        prefix = self.source[line_start:node.start_byte].decode("utf-8", errors="replace")
        return SourcePosition(file=self.path, line=node.start_point[0] + 1, column=len(prefix) + 1)

    def text_of(self, node: tree_sitter.Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
