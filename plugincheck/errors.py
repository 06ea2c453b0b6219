"""Failure taxonomy shared by every stage of an analysis run.

Each error carries a `kind` string that ends up verbatim in the
`error_kind` field of the result payload, so callers can tell a missing
file from malformed source without parsing the message.
"""

from typing import Optional


class AnalysisError(Exception):
    """Base class for failures that stop (or skip) part of an analysis.

    Carries the offending path (when known) and the original error for
    upstream logging.
    """

    kind = "AnalysisError"

    def __init__(self, message: str, path: Optional[str] = None, cause: Optional[Exception] = None):
        self.path = path
        self.cause = cause
        super().__init__(message)


class FetchError(AnalysisError):
    """Source text could not be obtained (I/O failure, non-2xx, budget exhausted)."""

    kind = "FetchError"


class ParseError(AnalysisError):
    """Source text is not valid JavaScript/TypeScript."""

    kind = "ParseError"

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        self.line = line
        self.column = column
        super().__init__(message, path=path, cause=cause)


class ConfigError(AnalysisError):
    """A build configuration document is present but unreadable or invalid."""

    kind = "ConfigError"
