"""JSON-with-comments support for tsconfig.json and friends.

tsconfig.json routinely carries // and /* */ comments, which the strict
json module rejects. strip_json_comments() removes them while leaving
string literals untouched; parse_jsonc() then hands the result to json.
"""

import json
from typing import Any

from plugincheck.errors import ConfigError


def strip_json_comments(src: str) -> str:
    """Remove // line comments and /* */ block comments outside strings.

    The newline ending a line comment is kept. An unterminated block
    comment swallows the rest of the input; the strict parser downstream
    decides whether what is left is still valid JSON.
    """
    out: list[str] = []
    in_string = False
    i = 0
    n = len(src)

    while i < n:
        c = src[i]

        if in_string:
            out.append(c)
            if c == "\\" and i + 1 < n:
                i += 1
                out.append(src[i])
            elif c == '"':
                in_string = False
            i += 1
            continue

        if c == '"':
            in_string = True
            out.append(c)
            i += 1
            continue

        if c == "/" and i + 1 < n and src[i + 1] == "/":
            while i < n and src[i] != "\n":
                i += 1
            continue

        if c == "/" and i + 1 < n and src[i + 1] == "*":
            end = src.find("*/", i + 2)
            i = n if end < 0 else end + 2
            continue

        out.append(c)
        i += 1

    return "".join(out)


def parse_jsonc(text: str, source: str = "<config>") -> Any:
    """Parse JSON-with-comments text.

    Raises:
        ConfigError: If the text is not valid JSON once comments are gone.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    try:
        return json.loads(strip_json_comments(text))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{source}: invalid JSON: {exc}", path=source, cause=exc) from exc
