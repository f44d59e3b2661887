"""Discover source files and the import renames each one needs."""

from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path
from typing import Dict, FrozenSet, Iterator, List, Union

import libcst as cst
from libcst.helpers import get_full_name_for_node

from .config import SOURCE_SUFFIXES, RewriteConfig, TraversalMode

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Rename:
    old: str
    new: str


@dataclasses.dataclass
class FileRecord:
    path: Path
    module: cst.Module
    renames: List[Rename] = dataclasses.field(default_factory=list)


@dataclasses.dataclass(frozen=True)
class SkippedFile:
    path: Path
    reason: str


@dataclasses.dataclass
class ScanResult:
    records: List[FileRecord] = dataclasses.field(default_factory=list)
    skipped: List[SkippedFile] = dataclasses.field(default_factory=list)


class ImportPathCollector(cst.CSTVisitor):
    """Collect the absolute module path of every import statement, in source order."""

    def __init__(self) -> None:
        super().__init__()
        self.paths: List[str] = []

    def visit_Import(self, node: cst.Import) -> None:
        for alias in node.names:
            name = get_full_name_for_node(alias.name)
            if name:
                self.paths.append(name)

    def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
        # Relative imports carry no absolute path to match against.
        if node.relative or node.module is None:
            return
        name = get_full_name_for_node(node.module)
        if name:
            self.paths.append(name)


def is_source_file(name: str) -> bool:
    return name.endswith(SOURCE_SUFFIXES)


def iter_source_files(root: Path, traversal: TraversalMode, excludes: FrozenSet[str]) -> Iterator[Path]:
    """Yield source files under ``root`` in a stable, sorted order."""

    root = Path(root)
    if traversal is TraversalMode.FLAT:
        for entry in sorted(root.iterdir()):
            if entry.is_file() and is_source_file(entry.name):
                yield entry
        return

    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excludes)
        for filename in sorted(filenames):
            if is_source_file(filename):
                yield Path(current) / filename


def find_renames(module: cst.Module, config: RewriteConfig) -> List[Rename]:
    collector = ImportPathCollector()
    module.visit(collector)

    unique: Dict[str, Rename] = {}
    for path in collector.paths:
        if path in unique:
            continue
        replacement = config.substitute(path)
        if replacement is None or replacement == path:
            continue
        unique[path] = Rename(old=path, new=replacement)
    return list(unique.values())


def scan_file(path: Path, config: RewriteConfig) -> Union[FileRecord, SkippedFile]:
    """Parse one file; unreadable or unparsable files come back as ``SkippedFile``."""

    try:
        source = path.read_bytes()
    except OSError as exc:
        return SkippedFile(path=path, reason=f"unable to read file: {exc}")

    try:
        module = cst.parse_module(source)
    except cst.ParserSyntaxError as exc:
        return SkippedFile(path=path, reason=f"syntax error: {exc.message} (line {exc.raw_line})")
    except (SyntaxError, UnicodeDecodeError, LookupError) as exc:
        # Bad or unknown PEP 263 coding declarations end up here.
        return SkippedFile(path=path, reason=f"unable to decode file: {exc}")

    return FileRecord(path=path, module=module, renames=find_renames(module, config))


def scan_directory(config: RewriteConfig) -> ScanResult:
    result = ScanResult()
    for path in iter_source_files(config.root, config.traversal, config.excludes):
        item = scan_file(path, config)
        if isinstance(item, SkippedFile):
            logger.debug("skipping %s: %s", item.path, item.reason)
            result.skipped.append(item)
            continue
        result.records.append(item)
    return result
