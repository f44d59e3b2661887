"""CSV audit log of the renames considered during a run."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Sequence, Tuple

if TYPE_CHECKING:
    from .rewriter import RewriteOutcome
    from .scanner import FileRecord

REPORT_HEADERS = ("file", "old_import", "new_import", "status")

ReportRow = Tuple[str, str, str, str]


def append_rows(path: Path, rows: Iterable[Sequence[str]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    file_exists = path.exists()
    with path.open("a", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh)
        if not file_exists:
            writer.writerow(REPORT_HEADERS)
        for row in rows:
            writer.writerow(row)


def outcome_rows(record: "FileRecord", outcome: "RewriteOutcome", dry_run: bool = False) -> List[ReportRow]:
    applied = {rename.old for rename in outcome.applied}
    rows: List[ReportRow] = []
    for rename in record.renames:
        if rename.old not in applied:
            status = "unchanged"
        elif dry_run:
            status = "planned"
        else:
            status = "applied"
        rows.append((str(record.path), rename.old, rename.new, status))
    return rows


def record_outcome(path: Path, record: "FileRecord", outcome: "RewriteOutcome", dry_run: bool = False) -> None:
    append_rows(path, outcome_rows(record, outcome, dry_run=dry_run))
