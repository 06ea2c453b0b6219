"""Analysis orchestrator: the public entry point of the engine.

A run:
1. Loads the build configuration (tsconfig.json, package.json)
2. Resolves the entry file
3. Fetches the entry file (fatal on failure)
4. Text mode: scans the entry file lexically
   Structural mode: parses the entry file (fatal on failure), expands the
   project file set, and walks every tree in order
5. Returns exactly one AnalysisResult

Engine errors never escape; they become failed results.
"""

import logging
import time
from typing import Optional

from plugincheck.analysis.types import AnalysisResult
from plugincheck.config import DetectionMode, Settings, get_settings
from plugincheck.detector.build_config import load_build_config
from plugincheck.detector.entry import EntryResolution, resolve_entry
from plugincheck.detector.types import BuildConfig
from plugincheck.errors import AnalysisError, ConfigError, FetchError
from plugincheck.project.graph import build_project_files
from plugincheck.project.resolution import is_declaration_file
from plugincheck.scanner.heuristics import find_hook_in_text
from plugincheck.scanner.hook_detector import find_hook
from plugincheck.scanner.parser import parse_source
from plugincheck.scanner.types import SourcePosition, SyntaxTree
from plugincheck.source.types import SourceTree, normalize_path

logger = logging.getLogger(__name__)


def analyze(
    tree: SourceTree,
    settings: Optional[Settings] = None,
    fallback_entry: Optional[str] = None,
    single_file: bool = False,
) -> AnalysisResult:
    """Analyse one repository snapshot.

    Args:
        tree: Read-only view of the snapshot.
        settings: Engine settings; loaded from the environment when None.
        fallback_entry: Entry file used when no configuration names one.
            Defaults to settings.fallback_entry_file.
        single_file: Analyse the entry file only, never the project graph.
    """
    settings = settings or get_settings()
    fallback = fallback_entry or settings.fallback_entry_file
    entry_file = fallback
    start = time.monotonic()

    try:
        config = load_build_config(tree)
        resolution = resolve_entry(tree, config, fallback)
        entry_file = resolution.path
        entry_path, content = _fetch_entry(tree, resolution, config)

        if settings.detection_mode == DetectionMode.TEXT:
            location = _search_text(entry_path, content, settings)
        else:
            entry_tree = parse_source(entry_path, content)
            trees = _candidate_trees(tree, config, entry_tree, settings, single_file)
            location = find_hook(trees, settings.hook_name)
    except AnalysisError as exc:
        logger.warning("Analysis of %r failed (%s): %s", tree, exc.kind, exc)
        return AnalysisResult.failed(entry_file, exc)

    result = _result_for(entry_file, location)
    logger.info(
        "Analysis of %r complete in %.2fs: entry=%s hook=%s",
        tree, time.monotonic() - start, entry_file, location or "missing",
    )
    return result


def analyze_source(
    filename: str,
    content: bytes | str,
    settings: Optional[Settings] = None,
) -> AnalysisResult:
    """Analyse a single file's content without any surrounding tree.

    The filename labels the result and selects the grammar; it does not
    have to exist anywhere.
    """
    settings = settings or get_settings()
    entry_file = filename or settings.fallback_entry_file
    data = content.encode("utf-8") if isinstance(content, str) else content

    try:
        if settings.detection_mode == DetectionMode.TEXT:
            location = _search_text(entry_file, data, settings)
        else:
            entry_tree = parse_source(entry_file, data)
            trees = [] if is_declaration_file(entry_file) else [entry_tree]
            location = find_hook(trees, settings.hook_name)
    except AnalysisError as exc:
        logger.warning("Analysis of %s failed (%s): %s", entry_file, exc.kind, exc)
        return AnalysisResult.failed(entry_file, exc)

    return _result_for(entry_file, location)


def _fetch_entry(
    tree: SourceTree,
    resolution: EntryResolution,
    config: BuildConfig,
) -> tuple[str, bytes]:
    """Fetch the entry file; every failure here is fatal.

    A missing fallback entry combined with unusable configuration is
    reported as a ConfigError: the configuration was the only signal and
    it could not be read.
    """
    entry_file = resolution.path
    entry_path = normalize_path(entry_file)
    if entry_path is None:
        raise FetchError(
            f"entry file [{entry_file}] is not a valid path inside the source tree",
            path=entry_file,
        )

    result = tree.fetch(entry_path)
    if result.exists:
        return entry_path, result.content

    if config.problems and resolution.is_fallback:
        raise ConfigError(
            f"entry file [{entry_file}] not found and build configuration is unusable: "
            + "; ".join(config.problems),
            path=entry_file,
        )
    raise FetchError(f"entry file [{entry_file}] not found", path=entry_file)


def _search_text(path: str, content: bytes, settings: Settings) -> Optional[SourcePosition]:
    if is_declaration_file(path):
        logger.info("Entry %s is a declaration file; nothing to search", path)
        return None
    return find_hook_in_text(path, content, settings.hook_name)


def _candidate_trees(
    tree: SourceTree,
    config: BuildConfig,
    entry_tree: SyntaxTree,
    settings: Settings,
    single_file: bool,
) -> list[SyntaxTree]:
    if single_file or not settings.whole_project:
        if is_declaration_file(entry_tree.path):
            logger.info("Entry %s is a declaration file; nothing to search", entry_tree.path)
            return []
        return [entry_tree]

    file_set = build_project_files(
        tree,
        config,
        entry_tree,
        max_files=settings.max_project_files,
        max_file_size=settings.max_file_size,
    )
    return list(file_set.ordered_trees())


def _result_for(entry_file: str, location: Optional[SourcePosition]) -> AnalysisResult:
    if location is None:
        return AnalysisResult.not_found(entry_file)
    return AnalysisResult.found(entry_file, location)
