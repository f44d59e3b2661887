"""Run configuration for import rewrites.

A single :class:`RewriteConfig` is built from the command line at startup and
handed to the scanner and the rewriter, so both can be driven directly from
tests without going through argument parsing.
"""

from __future__ import annotations

import dataclasses
import enum
import re
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

SOURCE_SUFFIXES = (".py", ".pyi")

EXCLUDED_DIRECTORIES = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "vendor",
        "__pycache__",
        ".venv",
        "venv",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
        "node_modules",
        "site-packages",
    }
)


class ImportRefactorError(Exception):
    """Base class for errors that end a run with exit code 1."""


class ConfigError(ImportRefactorError):
    pass


class TraversalMode(enum.Enum):
    RECURSIVE = "recursive"
    FLAT = "flat"


class MatchMode(enum.Enum):
    # WHOLE: pattern must cover the entire dotted path.
    WHOLE = "whole"
    # PARTIAL: every occurrence inside the path is substituted.
    PARTIAL = "partial"


@dataclasses.dataclass(frozen=True)
class RewriteConfig:
    pattern: "re.Pattern[str]"
    replacement: str
    root: Path = Path(".")
    traversal: TraversalMode = TraversalMode.RECURSIVE
    match: MatchMode = MatchMode.WHOLE
    excludes: FrozenSet[str] = EXCLUDED_DIRECTORIES
    debug: bool = False
    dry_run: bool = False
    report: Optional[Path] = None

    @classmethod
    def build(
        cls,
        pattern: str,
        replacement: str,
        *,
        root: Path = Path("."),
        traversal: TraversalMode = TraversalMode.RECURSIVE,
        match: MatchMode = MatchMode.WHOLE,
        extra_excludes: Iterable[str] = (),
        default_excludes: bool = True,
        debug: bool = False,
        dry_run: bool = False,
        report: Optional[Path] = None,
    ) -> "RewriteConfig":
        """Compile ``pattern`` and check ``replacement`` against it."""

        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            raise ConfigError(f"invalid --from pattern {pattern!r}: {exc}") from exc

        # sub() parses the template against the pattern before searching, so an
        # empty subject is enough to reject unknown group references.
        try:
            compiled.sub(replacement, "")
        except (re.error, IndexError) as exc:
            raise ConfigError(f"invalid --to replacement {replacement!r}: {exc}") from exc

        return cls(
            pattern=compiled,
            replacement=replacement,
            root=Path(root),
            traversal=traversal,
            match=match,
            excludes=(EXCLUDED_DIRECTORIES if default_excludes else frozenset()) | frozenset(extra_excludes),
            debug=debug,
            dry_run=dry_run,
            report=Path(report) if report is not None else None,
        )

    def substitute(self, path: str) -> Optional[str]:
        """Return the rewritten import path, or None if ``path`` does not match."""

        if self.match is MatchMode.WHOLE:
            found = self.pattern.fullmatch(path)
            if found is None:
                return None
            return found.expand(self.replacement)

        if self.pattern.search(path) is None:
            return None
        return self.pattern.sub(self.replacement, path)
