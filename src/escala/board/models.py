"""Pydantic models for the persisted schedule document.

The whole board lives in one JSON document. ``ScheduleDocument.to_json()``
is exactly what gets written to disk and served by ``GET /api/state``.
"""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field

MAX_HISTORY = 2000
MAX_AUDIT = 1000
MAX_NOTE_LENGTH = 500

CIENTE_ACTION = "ciente"


def assignment_key(officer_id: str, date: str) -> str:
    """Composite assignment key, e.g. ``"o1|2026-02-23"``."""
    return f"{officer_id}|{date}"


class Meta(BaseModel):
    """Descriptive metadata shown in the page header."""

    title: str = ""
    author: str = ""
    created_at: str = ""  # YYYY-MM-DD


class Period(BaseModel):
    """Informational bounds of the week; not enforced against ``dates``."""

    start: str = ""
    end: str = ""


class Officer(BaseModel):
    """A roster entry. ``id`` keys the assignment map."""

    id: str
    rank: str
    name: str


class HistoryEntry(BaseModel):
    """One effective cell change, recorded newest-first."""

    model_config = ConfigDict(populate_by_name=True)

    at: str
    user: str
    reason: str
    officer_id: str = Field(alias="officerId")
    date: str
    from_code: str = Field(default="", alias="from")
    to_code: str = Field(default="", alias="to")


class Signer(BaseModel):
    name: str = ""
    role: str = ""


class Ciente(BaseModel):
    """Acknowledgement record for the published schedule."""

    ok: bool = False
    at: str = ""
    by: str = ""


class Signatures(BaseModel):
    chefe_p1: Signer = Field(default_factory=lambda: Signer(role="Chefe P/1"))
    subcomandante: Signer = Field(default_factory=lambda: Signer(role="Subcomandante"))
    ciente: Ciente = Field(default_factory=Ciente)


class AuditEntry(BaseModel):
    """An administrative action (currently only acknowledgements)."""

    at: str
    action: str
    by: str
    note: str = ""


class ScheduleDocument(BaseModel):
    """The single persisted aggregate: roster, calendar, codes, cells, logs."""

    meta: Meta = Field(default_factory=Meta)
    period: Period = Field(default_factory=Period)
    dates: list[str] = Field(default_factory=list)
    codes: list[str] = Field(default_factory=list)
    codes_help: dict[str, str] = Field(default_factory=dict)
    officers: list[Officer] = Field(default_factory=list)
    assignments: dict[str, str] = Field(default_factory=dict)
    history: list[HistoryEntry] = Field(default_factory=list)
    signatures: Signatures = Field(default_factory=Signatures)
    audit: list[AuditEntry] = Field(default_factory=list)

    def officer(self, officer_id: str) -> Officer | None:
        """Find an officer by id (first match)."""
        return next((o for o in self.officers if o.id == officer_id), None)

    def code_for(self, officer_id: str, date: str) -> str:
        """Effective code for a cell; ``""`` when unassigned."""
        return self.assignments.get(assignment_key(officer_id, date), "")

    def to_json(self) -> dict:
        """Serialize to the persisted/served JSON shape."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_json(cls, data: dict) -> Self:
        """Validate an already-normalized document dict."""
        return cls.model_validate(data)
