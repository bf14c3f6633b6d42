"""Seed document written when no persisted board exists yet.

The demo roster lets a fresh deployment (e.g. an empty mounted volume)
open a working board immediately.
"""

import copy

DEFAULT_PERIOD = {"start": "2026-02-23", "end": "2026-03-01"}

DEFAULT_DATES = [
    "2026-02-23",
    "2026-02-24",
    "2026-02-25",
    "2026-02-26",
    "2026-02-27",
    "2026-02-28",
    "2026-03-01",
]

DEFAULT_CODES_HELP = {
    "EXP": "expediente",
    "SR": "supervisor regional",
    "FO": "folga",
    "MA": "meio expediente matutino",
    "VE": "meio expediente vespertino",
    "F": "férias",
    "LP": "licença/afastamento",
    "CFP_DIA": "cfp dia",
    "CFP_NOITE": "cfp noite",
    "12H": "serviço 12h",
    "12X36": "12x36",
    "PF": "ponto facultativo",
}

DEFAULT_CODES = list(DEFAULT_CODES_HELP)

DEFAULT_OFFICERS = [
    {"id": "o1", "rank": "Ten Cel PM", "name": "NOME 01"},
    {"id": "o2", "rank": "Maj PM", "name": "NOME 02"},
    {"id": "o3", "rank": "Cap PM", "name": "NOME 03"},
]

_DEFAULT_DOCUMENT = {
    "meta": {
        "title": "Escala de Oficiais (23/02 a 01/03)",
        "author": "",
        "created_at": "",
    },
    "period": DEFAULT_PERIOD,
    "dates": DEFAULT_DATES,
    "codes": DEFAULT_CODES,
    "codes_help": DEFAULT_CODES_HELP,
    "officers": DEFAULT_OFFICERS,
    "assignments": {},
    "history": [],
    "signatures": {
        "chefe_p1": {"name": "", "role": "Chefe P/1"},
        "subcomandante": {"name": "", "role": "Subcomandante"},
        "ciente": {"ok": False, "at": "", "by": ""},
    },
    "audit": [],
}


def default_document() -> dict:
    """Return a fresh deep copy of the seed document."""
    return copy.deepcopy(_DEFAULT_DOCUMENT)
