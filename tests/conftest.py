"""Shared pytest fixtures."""

import json

import pytest

from escala.board.service import ScheduleBoard
from escala.board.store import DocumentStore
from escala.core.config import Settings


def make_document(**overrides) -> dict:
    """Canonical two-officer, two-date document used across tests."""
    doc = {
        "meta": {"title": "Escala teste", "author": "", "created_at": "2026-02-22"},
        "period": {"start": "2026-02-23", "end": "2026-03-01"},
        "dates": ["2026-02-23", "2026-02-24"],
        "codes": ["FO", "EXP"],
        "codes_help": {"FO": "folga", "EXP": "expediente"},
        "officers": [
            {"id": "o1", "rank": "Cap", "name": "Ana"},
            {"id": "o2", "rank": "Maj", "name": "Bruno"},
        ],
        "assignments": {},
        "history": [],
        "signatures": {
            "chefe_p1": {"name": "", "role": "Chefe P/1"},
            "subcomandante": {"name": "Maj PM Mozna", "role": "Subcomandante"},
            "ciente": {"ok": False, "at": "", "by": ""},
        },
        "audit": [],
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "escala.json"


@pytest.fixture
def settings(data_file):
    """Settings with both secrets configured and files under tmp_path."""
    return Settings(
        data_file=data_file,
        admin_key="admin-secret",
        ciente_key="major-secret",
        deputy_name="Maj PM Mozna",
    )


@pytest.fixture
def store(settings):
    return DocumentStore(settings)


@pytest.fixture
def board(settings, store):
    return ScheduleBoard(settings, store)


@pytest.fixture
def write_document(data_file):
    """Write a raw document dict to the data file."""

    def _write(doc: dict) -> None:
        data_file.parent.mkdir(parents=True, exist_ok=True)
        data_file.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")

    return _write


@pytest.fixture
def read_document(data_file):
    """Read the raw persisted document."""

    def _read() -> dict:
        return json.loads(data_file.read_text(encoding="utf-8"))

    return _read


@pytest.fixture
def seeded(write_document):
    """Persist the canonical test document."""
    doc = make_document()
    write_document(doc)
    return doc


@pytest.fixture
def make_doc():
    """Factory for canonical documents with per-test overrides."""
    return make_document
