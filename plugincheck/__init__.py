"""Static checks for marketplace plugin submissions.

Public API:
    analyze(tree) -> AnalysisResult
    analyze_source(filename, content) -> AnalysisResult
"""

from plugincheck.analysis import AnalysisResult, analyze, analyze_source

__all__ = ["analyze", "analyze_source", "AnalysisResult"]
