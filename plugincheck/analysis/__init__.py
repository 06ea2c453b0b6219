"""Analysis module: entry resolution plus lifecycle-hook detection.

Public API:
    analyze(tree, settings) -> AnalysisResult
    analyze_source(filename, content, settings) -> AnalysisResult
"""

from plugincheck.analysis.orchestrator import analyze, analyze_source
from plugincheck.analysis.types import AnalysisResult

__all__ = ["analyze", "analyze_source", "AnalysisResult"]
