"""Shared types for the detector module.

BuildConfig is the single immutable view of a plugin's build
configuration, merged from tsconfig.json and package.json.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class BuildConfig:
    """Program-membership rules and entry hints for one snapshot.

    explicit_files / include_patterns / exclude_patterns: tsconfig.json
        "files", "include", "exclude", in declared order.
    main_field: package.json "main" (only when a non-empty string).
    allow_js / base_url / paths: the compilerOptions that change which
        files belong to the program and how imports resolve.
    has_compiler_config: tsconfig.json was present and parsed.
    problems: one message per configuration document that was present
        but unusable. Never fatal on its own.
    """

    explicit_files: tuple[str, ...] = ()
    include_patterns: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()
    main_field: Optional[str] = None
    allow_js: bool = False
    base_url: Optional[str] = None
    paths: tuple[tuple[str, tuple[str, ...]], ...] = ()
    has_compiler_config: bool = False
    problems: tuple[str, ...] = field(default_factory=tuple)

    @property
    def declares_membership(self) -> bool:
        """True when tsconfig.json names the files of the program."""
        return bool(self.explicit_files or self.include_patterns)

    def to_dict(self) -> dict:
        return {
            "explicit_files": list(self.explicit_files),
            "include_patterns": list(self.include_patterns),
            "exclude_patterns": list(self.exclude_patterns),
            "main_field": self.main_field,
            "allow_js": self.allow_js,
            "base_url": self.base_url,
            "paths": {pattern: list(targets) for pattern, targets in self.paths},
            "has_compiler_config": self.has_compiler_config,
            "problems": list(self.problems),
        }
