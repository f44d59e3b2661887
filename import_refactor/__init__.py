"""Rewrite import paths across a tree of Python source files."""

from .config import ConfigError, ImportRefactorError, MatchMode, RewriteConfig, TraversalMode
from .rewriter import RewriteError, RewriteOutcome, RunSummary, rewrite_file, rewrite_import, run
from .scanner import FileRecord, Rename, ScanResult, SkippedFile, scan_directory, scan_file

__all__ = [
    "ConfigError",
    "FileRecord",
    "ImportRefactorError",
    "MatchMode",
    "Rename",
    "RewriteConfig",
    "RewriteError",
    "RewriteOutcome",
    "RunSummary",
    "ScanResult",
    "SkippedFile",
    "TraversalMode",
    "rewrite_file",
    "rewrite_import",
    "run",
    "scan_directory",
    "scan_file",
]
