r"""Command line entry point.

```
import-refactor --from 'old_pkg(\..*)?' --to 'new_pkg\1'
import-refactor --from old_pkg --to new_pkg --root src --dry-run --report rewrites.csv
```
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import ImportRefactorError, MatchMode, RewriteConfig, TraversalMode
from .rewriter import RunSummary, run

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rewrite import paths across a tree of Python files")
    parser.add_argument("--from", dest="from_", default="", help="regular expression matched against import paths")
    parser.add_argument("--to", default="", help="replacement for matched import paths; may reference groups")
    parser.add_argument("--root", type=Path, default=Path("."), help="directory to scan (default: current directory)")
    parser.add_argument("--flat", action="store_true", help="only scan files directly inside --root")
    parser.add_argument("--partial", action="store_true", help="substitute matches anywhere inside an import path instead of requiring a whole-path match")
    parser.add_argument("--exclude", action="append", default=[], metavar="NAME", help="additional directory name to skip (repeatable)")
    parser.add_argument("--no-default-excludes", action="store_true", help="scan vendor, virtualenv and cache directories too")
    parser.add_argument("--dry-run", action="store_true", help="report renames without writing files")
    parser.add_argument("--report", type=Path, default=None, help="append a CSV audit row per rename to this file")
    parser.add_argument("--debug", action="store_true", help="log each rewrite with its absolute path")
    return parser.parse_args(argv)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, format=LOG_FORMAT, stream=sys.stderr)


def build_config(args: argparse.Namespace) -> RewriteConfig:
    return RewriteConfig.build(
        args.from_,
        args.to,
        root=args.root,
        traversal=TraversalMode.FLAT if args.flat else TraversalMode.RECURSIVE,
        match=MatchMode.PARTIAL if args.partial else MatchMode.WHOLE,
        extra_excludes=args.exclude,
        default_excludes=not args.no_default_excludes,
        debug=args.debug,
        dry_run=args.dry_run,
        report=args.report,
    )


def print_summary(summary: RunSummary, dry_run: bool) -> None:
    if dry_run:
        for outcome in summary.changed_files:
            for rename in outcome.applied:
                print(f"{outcome.path}: {rename.old} -> {rename.new}")
        print(f"Would rewrite {len(summary.changed_files)} files; skipped {len(summary.skipped)} unparsable files.")
        return
    print(f"Rewrote {len(summary.written_files)} files; skipped {len(summary.skipped)} unparsable files.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    if not args.from_ or not args.to:
        print("--from and --to flags required", file=sys.stderr)
        return 1

    configure_logging(args.debug)
    if not args.root.is_dir():
        print(f"--root {args.root} is not a directory", file=sys.stderr)
        return 1
    if args.report is not None and args.report.is_dir():
        print(f"--report {args.report} is a directory", file=sys.stderr)
        return 1

    try:
        config = build_config(args)
        summary = run(config)
    except ImportRefactorError as exc:
        print(exc, file=sys.stderr)
        return 1

    print_summary(summary, config.dry_run)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
