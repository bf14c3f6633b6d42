"""File-backed storage for the single schedule document.

Every request re-reads the file: there is no in-memory copy shared
between requests. Writes replace the whole document atomically
(per-write temporary file + ``os.replace``) so readers never see a partial write.

Usage::

    store = DocumentStore(settings)
    doc = store.load()
    doc.assignments["o1|2026-02-23"] = "FO"
    store.save(doc)
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from pydantic import ValidationError

from escala.board.errors import BoardError, StoreReadError, StoreWriteError
from escala.board.models import ScheduleDocument
from escala.board.normalize import normalize_document
from escala.board.seed import default_document
from escala.core.config import Settings, today_iso

logger = logging.getLogger(__name__)


def _dumps(data: dict) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


def apply_overrides(document: ScheduleDocument, settings: Settings) -> ScheduleDocument:
    """Return a copy with configured title/author and signer identities applied.

    Used on the read path only; overrides are never persisted by reads.
    """
    doc = document.model_copy(deep=True)
    if settings.title:
        doc.meta.title = settings.title
    if settings.author:
        doc.meta.author = settings.author
    if settings.chief_name:
        doc.signatures.chefe_p1.name = settings.chief_name
    if settings.deputy_name:
        doc.signatures.subcomandante.name = settings.deputy_name
    doc.signatures.chefe_p1.role = settings.chief_role or doc.signatures.chefe_p1.role
    doc.signatures.subcomandante.role = settings.deputy_role or doc.signatures.subcomandante.role
    return doc


class DocumentStore:
    """Read/normalize/write the persisted schedule document.

    ``lock`` guards every write made through this store, including the
    write-back of a normalized legacy document on the read path. Callers
    doing read-modify-write hold it around the whole sequence; it is
    reentrant so ``load`` and ``save`` can be called while holding it.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.path = Path(settings.data_file)
        self.lock = threading.RLock()

    def exists(self) -> bool:
        return self.path.exists()

    def ensure_initialized(self) -> bool:
        """Create the data directory and seed the document if absent.

        Returns:
            True if a new document was written, False if one already existed.

        Raises:
            StoreWriteError: If the directory or seed file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreWriteError(f"não foi possível criar {self.path.parent}: {e}") from e

        with self.lock:
            if self.path.exists():
                return False

            seeded = ScheduleDocument.from_json(normalize_document(default_document()))
            seeded.meta.created_at = today_iso(self.settings)
            seeded = apply_overrides(seeded, self.settings)
            self.save(seeded)
        logger.info("Seeded new schedule document at %s", self.path)
        return True

    def read_raw(self) -> dict:
        """Read and parse the persisted bytes without normalizing.

        Raises:
            StoreReadError: If the file is unreadable, not JSON, or not an object
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreReadError(f"não foi possível ler {self.path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StoreReadError(f"documento corrompido: {e}") from e

        if not isinstance(data, dict):
            raise StoreReadError("documento corrompido: raiz não é um objeto JSON")
        return data

    def load(self) -> ScheduleDocument:
        """Read, normalize and validate the document.

        If normalization changed the document, the canonical form is
        written back. That write-back is best-effort: a failure is logged
        and the normalized document is still returned.

        Raises:
            StoreReadError: If the file cannot be read or parsed
            StoreWriteError: If the seed document cannot be created
        """
        self.ensure_initialized()
        raw = self.read_raw()
        canonical = normalize_document(raw)

        try:
            document = ScheduleDocument.from_json(canonical)
        except ValidationError as e:
            raise StoreReadError(f"documento inválido: {e}") from e

        if canonical != raw:
            self._write_normalized(raw, document)

        return document

    def _write_normalized(self, raw: dict, document: ScheduleDocument) -> None:
        """Persist the canonical form unless the file changed since ``raw`` was read."""
        with self.lock:
            try:
                if self.read_raw() != raw:
                    logger.debug("Skipping write-back: %s changed since it was read", self.path)
                    return
                self.save(document)
            except BoardError as e:
                logger.warning("Could not persist normalized document: %s", e.details)
                return
        logger.info("Normalized legacy schedule document at %s", self.path)

    def save(self, document: ScheduleDocument) -> None:
        """Atomically replace the persisted document.

        Each write goes to its own temporary file in the data directory,
        which is then renamed over the document.

        Raises:
            StoreWriteError: If the temporary file cannot be written or renamed
        """
        payload = _dumps(document.to_json())
        tmp_name = None
        with self.lock:
            try:
                with tempfile.NamedTemporaryFile(
                    "w",
                    encoding="utf-8",
                    dir=self.path.parent,
                    prefix=f"{self.path.name}.",
                    suffix=".tmp",
                    delete=False,
                ) as tmp:
                    tmp_name = tmp.name
                    tmp.write(payload)
                os.replace(tmp_name, self.path)
            except OSError as e:
                if tmp_name:
                    Path(tmp_name).unlink(missing_ok=True)
                raise StoreWriteError(f"não foi possível gravar {self.path}: {e}") from e
        logger.debug("Saved schedule document (%d bytes)", len(payload))
