"""Board operations: lock-aware reads, batched updates, acknowledgements.

``ScheduleBoard`` ties the lock policy, the validation engine and the
document store together. Each mutation is a full load -> validate ->
apply -> save cycle. Mutations are serialized by the store's in-process
lock so two requests handled by the same process cannot overwrite each
other's changes; separate processes sharing one file remain
last-writer-wins.
"""

import logging
from datetime import datetime
from typing import Any

from escala.board.ciente import acknowledge
from escala.board.errors import DeniedError, LockedError, StoreReadError, StoreWriteError
from escala.board.models import Ciente, ScheduleDocument
from escala.board.store import DocumentStore, apply_overrides
from escala.board.updates import (
    UpdateResult,
    apply_changes,
    compute_changes,
    require_actor,
    require_updates,
)
from escala.core.config import Settings, local_now, utc_timestamp
from escala.core.lock import has_bypass, is_locked

logger = logging.getLogger(__name__)

_WEEKDAY_NAMES = ("segunda", "terça", "quarta", "quinta", "sexta", "sábado", "domingo")


def lock_description(settings: Settings) -> str:
    """Human-readable lock window, e.g. ``sexta 10h até domingo``."""
    start = _WEEKDAY_NAMES[settings.lock_weekday]
    end = _WEEKDAY_NAMES[(settings.lock_weekday + 2) % 7]
    return f"{start} {settings.lock_hour}h até {end}"


class ScheduleBoard:
    """Lock-aware operations over the shared schedule document."""

    def __init__(self, settings: Settings, store: DocumentStore | None = None) -> None:
        self.settings = settings
        self.store = store or DocumentStore(settings)

    def now(self) -> datetime:
        return local_now(self.settings)

    def is_locked(self, now: datetime | None = None) -> bool:
        """Evaluate the lock window against ``now`` (default: current local time)."""
        now = now or self.now()
        return is_locked(now, self.settings.lock_weekday, self.settings.lock_hour)

    def get_state(self) -> ScheduleDocument:
        """Load the document with read-time overrides applied.

        Raises:
            StoreReadError: If the document cannot be read, including when
                its directory or seed file cannot be created
        """
        try:
            document = self.store.load()
        except StoreWriteError as e:
            raise StoreReadError(e.details) from e
        return apply_overrides(document, self.settings)

    def update(
        self,
        user: Any,
        reason: Any,
        updates: Any,
        admin_key: str | None = None,
        now: datetime | None = None,
    ) -> UpdateResult:
        """Validate and apply a batch of cell edits.

        Checks run in order and stop at the first failure: lock window
        (unless the admin key matches), actor fields, non-empty batch,
        then each item against the current document.

        Raises:
            LockedError: Inside the lock window without a valid admin key
            MissingFieldError: Blank user or reason
            NoChangesError: Empty batch
            InvalidOfficerError, InvalidDateError, InvalidCodeError: Bad item
            StoreReadError, StoreWriteError: Storage failures
        """
        now = now or self.now()
        if self.is_locked(now) and not has_bypass(self.settings.admin_key, admin_key):
            raise LockedError(f"edição bloqueada ({lock_description(self.settings)})")

        user_text, reason_text = require_actor(user, reason)
        batch = require_updates(updates)

        with self.store.lock:
            document = self.store.load()
            changes = compute_changes(document, batch)
            if not changes:
                logger.info("Update by %s had no effective changes", user_text)
                return UpdateResult()

            apply_changes(document, changes, user_text, reason_text, utc_timestamp())
            self.store.save(document)

        logger.info("Applied %d change(s) by %s: %s", len(changes), user_text, reason_text)
        return UpdateResult(changes=tuple(changes))

    def acknowledger_name(self, document: ScheduleDocument) -> str:
        """Identity recorded for acknowledgements: configured deputy, then document."""
        deputy = document.signatures.subcomandante
        return self.settings.deputy_name or deputy.name or deputy.role or self.settings.deputy_role

    def acknowledge(
        self,
        provided_key: str | None,
        note: Any = "",
        admin_key: str | None = None,
    ) -> Ciente:
        """Record the deputy's acknowledgement of the schedule.

        ``provided_key`` may match either the acknowledgement key or the
        admin key; ``admin_key`` is checked against the admin key only.
        Not subject to the lock window.

        Raises:
            DeniedError: If neither key matches
            StoreReadError, StoreWriteError: Storage failures
        """
        settings = self.settings
        if not (
            has_bypass(settings.ciente_key, provided_key)
            or has_bypass(settings.admin_key, provided_key)
            or has_bypass(settings.admin_key, admin_key)
        ):
            raise DeniedError()

        with self.store.lock:
            document = self.store.load()
            by = self.acknowledger_name(document)
            ciente = acknowledge(document, by, str(note or ""), utc_timestamp())
            self.store.save(document)

        logger.info("Schedule acknowledged by %s", by)
        return ciente
