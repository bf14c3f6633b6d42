"""Acknowledgement ("ciente") of the published schedule.

Re-acknowledging is allowed and simply refreshes the timestamp; the web
page disables its button once an acknowledgement exists, but the server
does not enforce single use.
"""

from escala.board.models import (
    CIENTE_ACTION,
    MAX_AUDIT,
    MAX_NOTE_LENGTH,
    AuditEntry,
    Ciente,
    ScheduleDocument,
)


def acknowledge(document: ScheduleDocument, by: str, note: str, at: str) -> Ciente:
    """Mark the schedule as acknowledged and append an audit entry.

    Args:
        document: Document to mutate in place
        by: Acknowledging identity (from configuration, never from the key)
        note: Optional free-text note; trimmed and truncated
        at: Timestamp for the record and audit entry

    Returns:
        The new acknowledgement record
    """
    ciente = Ciente(ok=True, at=at, by=by)
    document.signatures.ciente = ciente
    document.audit.insert(
        0,
        AuditEntry(
            at=at,
            action=CIENTE_ACTION,
            by=by,
            note=(note or "").strip()[:MAX_NOTE_LENGTH],
        ),
    )
    if len(document.audit) > MAX_AUDIT:
        del document.audit[MAX_AUDIT:]
    return ciente
