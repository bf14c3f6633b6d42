#!/usr/bin/env python3
"""Admin CLI for the schedule board's data file.

Commands:
    init     - Create the data file with the seed roster if missing
    status   - Show lock state, roster size and acknowledgement
    history  - Print recent changes (newest first)
    backup   - Write a timestamped copy of the document
    restore  - Replace the document with a backup

Usage:
    uv run escala-admin status
    uv run escala-admin history --limit 20 --officer o1
    uv run escala-admin backup --output /path/
    uv run escala-admin restore backups/escala_20260223_101500_000000.json
"""

import argparse
import logging
import sys

from escala.board.errors import BoardError
from escala.board.service import ScheduleBoard, lock_description
from escala.core.backup import backup_document, list_backups, restore_backup
from escala.core.config import load_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _board() -> ScheduleBoard:
    return ScheduleBoard(load_settings())


def cmd_init(args: argparse.Namespace) -> int:
    """Create the data file if missing."""
    board = _board()
    created = board.store.ensure_initialized()
    if created:
        print(f"Created {board.store.path}")
    else:
        print(f"Already exists: {board.store.path}")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Print a summary of the board."""
    board = _board()
    doc = board.get_state()
    locked = board.is_locked()
    ciente = doc.signatures.ciente

    print(f"Title:       {doc.meta.title or '-'}")
    print(f"Data file:   {board.store.path}")
    print(f"Period:      {doc.period.start} → {doc.period.end}")
    print(f"Locked:      {'yes' if locked else 'no'} ({lock_description(board.settings)})")
    print(f"Officers:    {len(doc.officers)}")
    print(f"Dates:       {len(doc.dates)}")
    print(f"Codes:       {', '.join(doc.codes)}")
    print(f"Assigned:    {len(doc.assignments)}/{len(doc.officers) * len(doc.dates)} cells")
    print(f"History:     {len(doc.history)} entries")
    if ciente.ok:
        print(f"Ciente:      {ciente.by} at {ciente.at}")
    else:
        print("Ciente:      not acknowledged")
    return 0


def cmd_history(args: argparse.Namespace) -> int:
    """Print recent history entries."""
    doc = _board().get_state()
    entries = [e for e in doc.history if not args.officer or e.officer_id == args.officer]
    if not entries:
        print("No history entries")
        return 0

    for entry in entries[: args.limit]:
        officer = doc.officer(entry.officer_id)
        label = f"{officer.rank} {officer.name}" if officer else entry.officer_id
        old = entry.from_code or "-"
        new = entry.to_code or "-"
        print(f"{entry.at}  {entry.date}  {label}: {old} → {new}  ({entry.user}: {entry.reason})")
    return 0


def cmd_backup(args: argparse.Namespace) -> int:
    """Write a backup of the document."""
    board = _board()
    path = backup_document(board.store, args.output)
    print(f"Backup written to {path}")
    existing = list_backups(board.store, args.output)
    print(f"{len(existing)} backup(s) in {path.parent}")
    return 0


def cmd_restore(args: argparse.Namespace) -> int:
    """Restore the document from a backup file."""
    board = _board()
    doc = restore_backup(board.store, args.path)
    print(f"Restored {board.store.path} ({len(doc.officers)} officers, {len(doc.history)} changes)")
    return 0


def main() -> None:
    """CLI entry point for admin commands."""
    parser = argparse.ArgumentParser(description="Escala de Oficiais admin CLI")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("init", help="Create the data file if missing")
    sub.add_parser("status", help="Show board status")

    history_p = sub.add_parser("history", help="Show recent changes")
    history_p.add_argument("--limit", type=int, default=20, help="Max entries (default: 20)")
    history_p.add_argument("--officer", help="Only changes for this officer id")

    backup_p = sub.add_parser("backup", help="Back up the document")
    backup_p.add_argument("--output", help="Backup directory (default: next to the data file)")

    restore_p = sub.add_parser("restore", help="Restore the document from a backup")
    restore_p.add_argument("path", help="Backup file path")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "init": cmd_init,
        "status": cmd_status,
        "history": cmd_history,
        "backup": cmd_backup,
        "restore": cmd_restore,
    }
    try:
        code = commands[args.command](args)
    except BoardError as e:
        print(f"Error ({e.code}): {e.details}")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
