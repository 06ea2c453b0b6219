"""Structural lifecycle-hook detector.

Walks tree-sitter syntax trees looking for a member that implements the
hook. Matching is by name only; the owning class or object is irrelevant.

Recognised shapes (async, generator and accessor forms included):

  class P { onload() {} }              method_definition
  const p = { onload() {} }            method_definition
  class P { onload = () => {} }        field_definition / public_field_definition
  const p = { onload: function () {} } pair
  this.onload = async () => {}         assignment_expression

Comments and string literals are separate leaf nodes, so text mentioning
the hook there can never match. Bodiless declarations (interface members,
abstract or overload signatures) are not implementations and are ignored.
"""

import logging
from typing import Iterable, Optional

import tree_sitter

from plugincheck.scanner.types import SourcePosition, SyntaxTree

logger = logging.getLogger(__name__)

HOOK_NAME = "onload"

# Node types that evaluate to a callable value.
_FUNCTION_TYPES = {
    "function",
    "function_expression",
    "arrow_function",
    "generator_function",
}

_FIELD_TYPES = {"field_definition", "public_field_definition"}


def find_hook(trees: Iterable[SyntaxTree], name: str = HOOK_NAME) -> Optional[SourcePosition]:
    """Return the first hook position across trees, in the order given.

    Trees after the first match are never walked.
    """
    for syntax_tree in trees:
        position = find_hook_in_tree(syntax_tree, name)
        if position is not None:
            logger.debug("Hook %s found at %s", name, position)
            return position
    return None


def find_hook_in_tree(syntax_tree: SyntaxTree, name: str = HOOK_NAME) -> Optional[SourcePosition]:
    """Pre-order, depth-first, left-to-right search of one tree."""
    stack: list[tree_sitter.Node] = [syntax_tree.root]
    while stack:
        node = stack.pop()
        name_node = _hook_name_node(node, name, syntax_tree)
        if name_node is not None:
            return syntax_tree.position_of(name_node)
        stack.extend(reversed(node.children))
    return None


def _hook_name_node(
    node: tree_sitter.Node, name: str, syntax_tree: SyntaxTree
) -> Optional[tree_sitter.Node]:
    """Return the name token if `node` implements the hook, else None."""
    if node.type == "method_definition":
        key = node.child_by_field_name("name")
        return key if _is_named(key, name, syntax_tree) else None

    if node.type in _FIELD_TYPES:
        # JavaScript names the field "property", TypeScript "name"
        key = node.child_by_field_name("property") or node.child_by_field_name("name")
        if _is_named(key, name, syntax_tree) and _is_function(node.child_by_field_name("value")):
            return key
        return None

    if node.type == "pair":
        key = node.child_by_field_name("key")
        if _is_named(key, name, syntax_tree) and _is_function(node.child_by_field_name("value")):
            return key
        return None

    if node.type == "assignment_expression":
        left = node.child_by_field_name("left")
        if left is None or left.type != "member_expression":
            return None
        key = left.child_by_field_name("property")
        if _is_named(key, name, syntax_tree) and _is_function(node.child_by_field_name("right")):
            return key
        return None

    return None


def _is_named(node: Optional[tree_sitter.Node], name: str, syntax_tree: SyntaxTree) -> bool:
    if node is None:
        return False
    if node.type in ("property_identifier", "identifier"):
        return syntax_tree.text_of(node) == name
    if node.type == "string":
        return syntax_tree.text_of(node)[1:-1] == name
    return False


def _is_function(node: Optional[tree_sitter.Node]) -> bool:
    while node is not None and node.type == "parenthesized_expression":
        node = node.named_children[0] if node.named_children else None
    return node is not None and node.type in _FUNCTION_TYPES
