"""Build configuration loader.

Reads at most two documents from the root of a source tree:

  tsconfig.json  (JSON with comments) -> files / include / exclude /
                                          compilerOptions
  package.json   (strict JSON)        -> main

A document that is absent contributes nothing. A document that is present
but unusable is recorded in BuildConfig.problems and otherwise ignored;
loading never raises.
"""

import json
import logging
from typing import Any, Optional

from plugincheck.detector.jsonc import parse_jsonc
from plugincheck.detector.types import BuildConfig
from plugincheck.errors import ConfigError
from plugincheck.source.types import SourceTree, try_fetch

logger = logging.getLogger(__name__)

TSCONFIG_FILE = "tsconfig.json"
PACKAGE_JSON_FILE = "package.json"


def load_build_config(tree: SourceTree) -> BuildConfig:
    """Read tsconfig.json and package.json from the tree root."""
    problems: list[str] = []
    fields: dict[str, Any] = {}

    tsconfig = _load_document(tree, TSCONFIG_FILE, problems, allow_comments=True)
    if tsconfig is not None:
        fields.update(_tsconfig_fields(tsconfig))
        fields["has_compiler_config"] = True

    package = _load_document(tree, PACKAGE_JSON_FILE, problems, allow_comments=False)
    if package is not None:
        main = package.get("main")
        if isinstance(main, str) and main:
            fields["main_field"] = main

    config = BuildConfig(problems=tuple(problems), **fields)
    logger.debug("Loaded build config: %s", config.to_dict())
    return config


def _load_document(
    tree: SourceTree,
    name: str,
    problems: list[str],
    allow_comments: bool,
) -> Optional[dict]:
    """Fetch and parse one JSON document; None if absent or unusable."""
    data = try_fetch(tree, name)
    if data is None:
        return None

    try:
        text = data.decode("utf-8-sig")
        if allow_comments:
            document = parse_jsonc(text, source=name)
        else:
            document = json.loads(text)
    except UnicodeDecodeError as exc:
        problems.append(f"{name}: not UTF-8: {exc}")
        logger.warning("Ignoring %s: not UTF-8", name)
        return None
    except json.JSONDecodeError as exc:
        problems.append(f"{name}: invalid JSON: {exc}")
        logger.warning("Ignoring %s: %s", name, exc)
        return None
    except ConfigError as exc:
        problems.append(str(exc))
        logger.warning("Ignoring %s: %s", name, exc)
        return None

    if not isinstance(document, dict):
        problems.append(f"{name}: top-level value is not an object")
        logger.warning("Ignoring %s: top-level value is not an object", name)
        return None

    return document


def _tsconfig_fields(tsconfig: dict) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "explicit_files": _string_list(tsconfig.get("files")),
        "include_patterns": _string_list(tsconfig.get("include")),
        "exclude_patterns": _string_list(tsconfig.get("exclude")),
    }

    options = tsconfig.get("compilerOptions")
    if not isinstance(options, dict):
        return fields

    fields["allow_js"] = options.get("allowJs") is True

    base_url = options.get("baseUrl")
    if isinstance(base_url, str) and base_url:
        fields["base_url"] = base_url

    paths = options.get("paths")
    if isinstance(paths, dict):
        fields["paths"] = tuple(
            (pattern, _string_list(targets))
            for pattern, targets in paths.items()
            if isinstance(pattern, str) and _string_list(targets)
        )

    return fields


def _string_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str) and item)
