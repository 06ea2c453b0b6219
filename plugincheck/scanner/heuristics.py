"""Text-mode lifecycle-hook detector.

Uses a regex over raw source lines instead of a syntax tree. Cheaper and
grammar-agnostic, but it cannot tell code from comments or string
literals: `// onload() should be implemented` counts as a match. Only
used when configured explicitly.
"""

import logging
import re
from typing import Optional

from plugincheck.scanner.hook_detector import HOOK_NAME
from plugincheck.scanner.types import SourcePosition

logger = logging.getLogger(__name__)

# <name>(            method or call form
# <name> = / :       followed by function, async function, (...) => or x =>
_HOOK_PATTERN_TEMPLATE = (
    r"(?<![\w$]){name}\s*"
    r"(?:\(|[=:]\s*(?:async\s*)?(?:function\b|\([^()]*\)\s*=>|[A-Za-z_$][\w$]*\s*=>))"
)


def hook_pattern(name: str = HOOK_NAME) -> re.Pattern:
    return re.compile(_HOOK_PATTERN_TEMPLATE.format(name=re.escape(name)))


def find_hook_in_text(file_path: str, content: bytes | str, name: str = HOOK_NAME) -> Optional[SourcePosition]:
    """Return the position of the first line that looks like the hook."""
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    pattern = hook_pattern(name)

    # Only "\n" ends a line, matching tree-sitter row numbers
    for line_num, line in enumerate(content.split("\n"), start=1):
        line = line.removesuffix("\r")
        match = pattern.search(line)
        if match:
            position = SourcePosition(file=file_path, line=line_num, column=match.start() + 1)
            logger.debug("Text match for %s at %s", name, position)
            return position

    return None
