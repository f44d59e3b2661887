"""Apply import renames to parsed files and write them back in place."""

from __future__ import annotations

import dataclasses
import keyword
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Tuple, Union

import libcst as cst
from libcst.helpers import get_full_name_for_node

from .config import ImportRefactorError, RewriteConfig
from .report import record_outcome
from .scanner import FileRecord, Rename, ScanResult, SkippedFile, scan_directory

logger = logging.getLogger(__name__)

DottedName = Union[cst.Name, cst.Attribute]


class RewriteError(ImportRefactorError):
    """A file could not be rewritten; ends the run."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class InvalidImportPath(ValueError):
    pass


@dataclasses.dataclass
class RewriteOutcome:
    path: Path
    applied: List[Rename] = dataclasses.field(default_factory=list)
    written: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.applied)


@dataclasses.dataclass
class RunSummary:
    outcomes: List[RewriteOutcome] = dataclasses.field(default_factory=list)
    skipped: List[SkippedFile] = dataclasses.field(default_factory=list)

    @property
    def changed_files(self) -> List[RewriteOutcome]:
        return [outcome for outcome in self.outcomes if outcome.changed]

    @property
    def written_files(self) -> List[RewriteOutcome]:
        return [outcome for outcome in self.outcomes if outcome.written]


def dotted_name(path: str) -> DottedName:
    """Build the ``Name``/``Attribute`` chain for ``path``, e.g. ``a.b.c``."""

    parts = path.split(".")
    for part in parts:
        if not part.isidentifier() or keyword.iskeyword(part):
            raise InvalidImportPath(f"{path!r} is not a valid import path")

    node: DottedName = cst.Name(parts[0])
    for part in parts[1:]:
        node = cst.Attribute(value=node, attr=cst.Name(part))
    return node


class ImportPathRewriter(cst.CSTTransformer):
    """Replace import module paths according to an ``{old: new}`` mapping.

    Lookups use each node's original path, so a single pass never feeds the
    output of one rename into another. ``applied`` records, in order, the
    renames that changed at least one import.
    """

    def __init__(self, renames: Mapping[str, str]) -> None:
        super().__init__()
        self.renames = dict(renames)
        self.applied: Dict[str, str] = {}

    def _replacement(self, node: DottedName) -> Union[DottedName, None]:
        path = get_full_name_for_node(node)
        if path is None:
            return None
        new = self.renames.get(path)
        if new is None or new == path:
            return None
        replacement = dotted_name(new)
        self.applied.setdefault(path, new)
        return replacement

    def leave_Import(self, original_node: cst.Import, updated_node: cst.Import) -> cst.Import:
        names = []
        changed = False
        for alias in updated_node.names:
            replacement = self._replacement(alias.name)
            if replacement is None:
                names.append(alias)
                continue
            names.append(alias.with_changes(name=replacement))
            changed = True
        if not changed:
            return updated_node
        return updated_node.with_changes(names=names)

    def leave_ImportFrom(self, original_node: cst.ImportFrom, updated_node: cst.ImportFrom) -> cst.ImportFrom:
        if updated_node.relative or updated_node.module is None:
            return updated_node
        replacement = self._replacement(updated_node.module)
        if replacement is None:
            return updated_node
        return updated_node.with_changes(module=replacement)


def rewrite_import(module: cst.Module, old: str, new: str) -> Tuple[cst.Module, bool]:
    """Rewrite every import of ``old`` to ``new``; report whether anything changed."""

    rewriter = ImportPathRewriter({old: new})
    updated = module.visit(rewriter)
    return updated, bool(rewriter.applied)


def rewrite_file(record: FileRecord, config: RewriteConfig) -> RewriteOutcome:
    """Apply a record's renames and overwrite the file if any import changed."""

    try:
        absolute = record.path.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise RewriteError(record.path, f"couldn't resolve absolute path: {exc}") from exc

    outcome = RewriteOutcome(path=record.path)
    if not record.renames:
        return outcome

    rewriter = ImportPathRewriter({rename.old: rename.new for rename in record.renames})
    try:
        updated = record.module.visit(rewriter)
    except (InvalidImportPath, cst.CSTValidationError) as exc:
        raise RewriteError(record.path, f"couldn't format file: {exc}") from exc

    outcome.applied = [Rename(old=old, new=new) for old, new in rewriter.applied.items()]
    if not outcome.applied or config.dry_run:
        return outcome

    try:
        data = updated.bytes
    except (UnicodeEncodeError, LookupError) as exc:
        raise RewriteError(record.path, f"couldn't format file: {exc}") from exc

    try:
        absolute.write_bytes(data)
    except OSError as exc:
        raise RewriteError(record.path, f"couldn't write file: {exc}") from exc

    outcome.written = True
    if config.debug:
        for rename in outcome.applied:
            logger.debug("rewrite_file(new_name=%r), abs=%r, src_dir=%r", rename.new, str(absolute), str(absolute.parent))
    return outcome


def rewrite_records(scan: ScanResult, config: RewriteConfig) -> RunSummary:
    """Rewrite scanned files in order, stopping at the first ``RewriteError``."""

    summary = RunSummary(skipped=list(scan.skipped))
    for record in scan.records:
        outcome = rewrite_file(record, config)
        summary.outcomes.append(outcome)
        if config.report is not None and record.renames:
            try:
                record_outcome(config.report, record, outcome, dry_run=config.dry_run)
            except OSError as exc:
                raise RewriteError(config.report, f"couldn't write report: {exc}") from exc
    return summary


def run(config: RewriteConfig) -> RunSummary:
    return rewrite_records(scan_directory(config), config)
