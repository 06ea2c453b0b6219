"""Types for the analysis module.

AnalysisResult is the only artifact an analysis run hands back. It is
built exactly once, through one of three constructors, and never mutated.
"""

from dataclasses import dataclass
from typing import Optional

from plugincheck.errors import AnalysisError
from plugincheck.scanner.types import SourcePosition

_CAMEL_KEYS = {
    "has_onload": "hasOnload",
    "entry_file": "entryFile",
    "onload_file": "onloadFile",
    "onload_line": "onloadLine",
    "onload_column": "onloadColumn",
    "error_kind": "errorKind",
}


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one analysis run.

    has_hook: the lifecycle hook was found.
    entry_file: the resolved entry file, verbatim; always set, even on failure.
    hook_location: where the hook was found; present iff has_hook.
    error / error_kind: set only when the run could not complete.

    `passed` is always `has_hook`: the hook is the only compliance criterion.
    A clean negative (passed=False, error=None) is distinct from a failure
    (passed=False, error set).
    """

    has_hook: bool
    entry_file: str
    hook_location: Optional[SourcePosition] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def __post_init__(self) -> None:
        if self.has_hook != (self.hook_location is not None):
            raise ValueError("hook_location must be present iff has_hook is true")
        if self.has_hook and self.error:
            raise ValueError("a result with the hook cannot carry an error")
        if not self.entry_file:
            raise ValueError("entry_file must always be populated")

    @classmethod
    def found(cls, entry_file: str, location: SourcePosition) -> "AnalysisResult":
        return cls(has_hook=True, entry_file=entry_file, hook_location=location)

    @classmethod
    def not_found(cls, entry_file: str) -> "AnalysisResult":
        return cls(has_hook=False, entry_file=entry_file)

    @classmethod
    def failed(cls, entry_file: str, error: AnalysisError) -> "AnalysisResult":
        return cls(has_hook=False, entry_file=entry_file, error=str(error), error_kind=error.kind)

    @property
    def passed(self) -> bool:
        return self.has_hook

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def to_dict(self, camel_case: bool = False) -> dict:
        location = self.hook_location
        data = {
            "has_onload": self.has_hook,
            "pass": self.passed,
            "entry_file": self.entry_file,
            "onload_file": location.file if location else None,
            "onload_line": location.line if location else None,
            "onload_column": location.column if location else None,
            "error": self.error,
            "error_kind": self.error_kind,
        }
        if camel_case:
            return {_CAMEL_KEYS.get(key, key): value for key, value in data.items()}
        return data
