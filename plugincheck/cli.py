"""CLI entrypoints for plugincheck commands."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

import structlog

from .analysis import AnalysisResult, analyze, analyze_source
from .config import DetectionMode, Settings, get_settings
from .logging import configure_structlog
from .source import LocalSourceTree, RawFileSourceTree, build_file_preview_url, build_repo_home_url

logger = structlog.get_logger(__name__)


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in DetectionMode],
        default=None,
        help="Detection mode (defaults to PLUGINCHECK_DETECTION_MODE or structural).",
    )
    parser.add_argument(
        "--camel-case",
        action="store_true",
        help="Emit camelCase keys (hasOnload, entryFile, ...) instead of snake_case.",
    )
    parser.add_argument(
        "--no-project",
        action="store_true",
        help="Analyse the entry file only instead of the whole project graph.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Human-readable debug logs on stderr.",
    )


def _add_entry_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--entry",
        default=None,
        help="Fallback entry file when no build configuration names one (default: index.js).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plugincheck",
        description="Check that a plugin implements its onload lifecycle hook.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    dir_parser = subparsers.add_parser("dir", help="Analyse a source tree on disk.")
    dir_parser.add_argument("path", help="Path to the plugin repository root.")
    _add_entry_option(dir_parser)
    _add_common_options(dir_parser)

    stdin_parser = subparsers.add_parser(
        "stdin",
        help="Analyse a single file read from standard input.",
    )
    stdin_parser.add_argument("filename", help="Name of the file (selects the grammar, labels the result).")
    _add_common_options(stdin_parser)

    remote_parser = subparsers.add_parser(
        "remote",
        help="Analyse a repository snapshot through raw file URLs.",
    )
    remote_parser.add_argument("owner", help="Repository owner.")
    remote_parser.add_argument("repo", help="Repository name.")
    remote_parser.add_argument("ref", help="Commit SHA, tag or branch.")
    _add_entry_option(remote_parser)
    _add_common_options(remote_parser)

    return parser


def _settings_for(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.mode:
        overrides["detection_mode"] = DetectionMode(args.mode)
    if args.no_project:
        overrides["whole_project"] = False
    if args.verbose:
        overrides["debug"] = True
    return get_settings().model_copy(update=overrides)


def _run(args: argparse.Namespace, settings: Settings) -> AnalysisResult:
    if args.command == "dir":
        tree = LocalSourceTree(args.path)
        return analyze(tree, settings, fallback_entry=args.entry)

    if args.command == "stdin":
        content = sys.stdin.buffer.read()
        return analyze_source(args.filename, content, settings)

    with RawFileSourceTree(args.owner, args.repo, args.ref, settings) as tree:
        result = analyze(tree, settings, fallback_entry=args.entry)
        logger.info(
            "remote fetches",
            repo=build_repo_home_url(args.owner, args.repo),
            requests=tree.requests_made,
        )
    if result.hook_location is not None:
        logger.info(
            "hook located",
            url=build_file_preview_url(
                args.owner, args.repo, args.ref, result.hook_location.file, result.hook_location.line
            ),
        )
    return result


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = _settings_for(args)
    configure_structlog(debug=settings.debug)

    result = _run(args, settings)
    payload = result.to_dict(camel_case=args.camel_case)
    sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
    sys.stdout.flush()

    if result.is_failure:
        logger.warning("analysis failed", error_kind=result.error_kind, error=result.error)
        return 1
    logger.info("analysis complete", entry_file=result.entry_file, passed=result.passed)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
