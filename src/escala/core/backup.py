"""Backup utilities for the schedule document."""

import json
import logging
from datetime import datetime
from pathlib import Path

from escala.board.errors import StoreReadError
from escala.board.models import ScheduleDocument
from escala.board.normalize import normalize_document
from escala.board.store import DocumentStore

logger = logging.getLogger(__name__)

BACKUP_TYPE = "escala_document"


def get_backup_dir(store: DocumentStore, base_dir: Path | str | None = None) -> Path:
    """Get or create the backup directory.

    Args:
        store: Document store; the default directory is ``backups/`` next to its file
        base_dir: Base directory for backups. If None, uses the default.

    Returns:
        Path to backup directory
    """
    backup_path = store.path.parent / "backups" if base_dir is None else Path(base_dir)
    backup_path.mkdir(parents=True, exist_ok=True)
    return backup_path


def backup_document(
    store: DocumentStore,
    backup_dir: Path | str | None = None,
    prefix: str = "escala",
) -> Path:
    """Back up the current schedule document to a timestamped JSON file.

    Args:
        store: Store to read the document from
        backup_dir: Directory to save backup. If None, uses default.
        prefix: Prefix for the backup filename

    Returns:
        Path to the created backup file
    """
    document = store.load()
    backup_dir = get_backup_dir(store, backup_dir)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    filepath = backup_dir / f"{prefix}_{timestamp}.json"

    data = {
        "backup_type": BACKUP_TYPE,
        "timestamp": datetime.now().isoformat(),
        "history_count": len(document.history),
        "document": document.to_json(),
    }

    with filepath.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    logger.info(f"Backed up schedule document to {filepath}")
    return filepath


def restore_backup(store: DocumentStore, path: Path | str) -> ScheduleDocument:
    """Replace the persisted document with a backup.

    Accepts either a backup wrapper (``{"backup_type", "document"}``) or
    a bare document; both go through normalization before saving.

    Raises:
        StoreReadError: If the backup cannot be read or parsed
        StoreWriteError: If the document cannot be written
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise StoreReadError(f"backup ilegível {path}: {e}") from e

    if isinstance(data, dict) and data.get("backup_type") == BACKUP_TYPE:
        data = data.get("document")
    if not isinstance(data, dict):
        raise StoreReadError(f"backup inválido: {path}")

    document = ScheduleDocument.from_json(normalize_document(data))
    store.ensure_initialized()
    store.save(document)
    logger.info(f"Restored schedule document from {path}")
    return document


def list_backups(store: DocumentStore, backup_dir: Path | str | None = None) -> list[Path]:
    """List all backup files in the backup directory.

    Returns:
        List of backup file paths, sorted by modification time (newest first)
    """
    backup_dir = get_backup_dir(store, backup_dir)
    backups = list(backup_dir.glob("*.json"))
    return sorted(backups, key=lambda p: p.stat().st_mtime, reverse=True)
