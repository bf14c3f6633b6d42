"""Validation and diffing of batched cell edits.

These functions operate on an in-memory ``ScheduleDocument`` and never
touch storage; ``ScheduleBoard.update`` wires them to the lock policy and
the document store.

A batch is validated item by item in submission order and fails on the
first invalid item, before anything is applied. Items that would not
change the cell are dropped silently.
"""

from dataclasses import dataclass
from typing import Any

from escala.board.errors import (
    InvalidCodeError,
    InvalidDateError,
    InvalidOfficerError,
    MissingFieldError,
    NoChangesError,
)
from escala.board.models import MAX_HISTORY, HistoryEntry, ScheduleDocument, assignment_key

NO_EFFECTIVE_CHANGE = "nenhuma mudança efetiva"


@dataclass(frozen=True)
class Change:
    """An effective edit: the cell's value moves from ``old_code`` to ``new_code``."""

    officer_id: str
    date: str
    old_code: str
    new_code: str

    @property
    def key(self) -> str:
        return assignment_key(self.officer_id, self.date)


@dataclass(frozen=True)
class UpdateResult:
    changes: tuple[Change, ...] = ()

    @property
    def changed(self) -> int:
        return len(self.changes)

    @property
    def message(self) -> str | None:
        return None if self.changes else NO_EFFECTIVE_CHANGE


def clean_text(value: Any) -> str:
    """Coerce request input to a stripped string; falsy values become ``""``."""
    if not value:
        return ""
    return str(value).strip()


def require_actor(user: Any, reason: Any) -> tuple[str, str]:
    """Validate who made the change and why.

    Raises:
        MissingFieldError: If either field is blank after trimming
    """
    user_text = clean_text(user)
    reason_text = clean_text(reason)
    if not user_text:
        raise MissingFieldError("user", "informe quem alterou")
    if not reason_text:
        raise MissingFieldError("reason", "informe o motivo da alteração")
    return user_text, reason_text


def require_updates(updates: Any) -> list:
    """Ensure the batch is a non-empty list.

    Raises:
        NoChangesError: If ``updates`` is missing, not a list, or empty
    """
    if not isinstance(updates, list) or not updates:
        raise NoChangesError()
    return updates


def compute_changes(document: ScheduleDocument, updates: list) -> list[Change]:
    """Validate a batch against the document and return the effective changes.

    Each item is ``{"officerId", "date", "code"}``; an empty code clears
    the cell. Validation stops at the first invalid item.

    Raises:
        InvalidOfficerError: Unknown officer id
        InvalidDateError: Date not among the document's dates
        InvalidCodeError: Code neither empty nor in the document's codes
    """
    officer_ids = {o.id for o in document.officers}
    dates = set(document.dates)
    codes = set(document.codes)

    changes: list[Change] = []
    for item in updates:
        fields = item if isinstance(item, dict) else {}
        officer_id = clean_text(fields.get("officerId"))
        date = clean_text(fields.get("date"))
        code = clean_text(fields.get("code"))

        if officer_id not in officer_ids:
            raise InvalidOfficerError(officer_id)
        if date not in dates:
            raise InvalidDateError(date)
        if code and code not in codes:
            raise InvalidCodeError(code)

        current = document.code_for(officer_id, date)
        if current == code:
            continue
        changes.append(Change(officer_id, date, current, code))

    return changes


def apply_changes(
    document: ScheduleDocument,
    changes: list[Change],
    user: str,
    reason: str,
    at: str,
) -> None:
    """Apply effective changes in order and record them in the history.

    History is newest-first and capped at ``MAX_HISTORY`` entries; the
    oldest entries fall off the tail.
    """
    for change in changes:
        if change.new_code:
            document.assignments[change.key] = change.new_code
        else:
            document.assignments.pop(change.key, None)

        document.history.insert(
            0,
            HistoryEntry(
                at=at,
                user=user,
                reason=reason,
                officer_id=change.officer_id,
                date=change.date,
                from_code=change.old_code,
                to_code=change.new_code,
            ),
        )

    if len(document.history) > MAX_HISTORY:
        del document.history[MAX_HISTORY:]
