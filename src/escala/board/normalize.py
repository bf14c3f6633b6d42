"""Load-time normalization of the persisted schedule document.

Older deployments wrote Portuguese or alternate field names (``posto``,
``nome``, ``legend``, ...). ``normalize_document`` maps any decoded JSON
object onto the canonical shape understood by ``ScheduleDocument``.

Alias lookups are table-driven: to accept a new legacy spelling, add it
to the relevant tuple below. The first spelling present wins.
"""

import logging
from collections.abc import Mapping
from typing import Any

from escala.board.seed import DEFAULT_CODES, DEFAULT_DATES, DEFAULT_PERIOD

logger = logging.getLogger(__name__)

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "meta": ("meta",),
    "period": ("period", "periodo"),
    "dates": ("dates", "datas"),
    "codes": ("codes", "codigos"),
    "codes_help": ("codes_help", "legend", "legenda"),
    "officers": ("officers", "oficiais"),
    "assignments": ("assignments", "escala", "atribuicoes"),
    "history": ("history", "historico"),
    "signatures": ("signatures", "assinaturas"),
    "audit": ("audit", "auditoria"),
}

OFFICER_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "rank": ("rank", "posto"),
    "name": ("name", "nome"),
}

SIGNER_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "nome"),
    "role": ("role", "cargo"),
}

DEFAULT_SIGNER_ROLES = {"chefe_p1": "Chefe P/1", "subcomandante": "Subcomandante"}

HISTORY_FIELDS = ("at", "user", "reason", "officerId", "date", "from", "to")
AUDIT_FIELDS = ("at", "action", "by", "note")

_MISSING = object()


def _pick(data: Mapping, aliases: tuple[str, ...]) -> Any:
    """Return the value of the first alias present in ``data``."""
    for key in aliases:
        if key in data:
            return data[key]
    return _MISSING


def _text(value: Any) -> str:
    """Coerce a scalar to a stripped string (``None``/empty -> ``""``)."""
    if value is None or value is _MISSING or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _unique_strings(values: list) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        text = _text(value)
        if text and text not in seen:
            seen[text] = None
    return list(seen)


def _normalize_meta(value: Any) -> dict:
    meta = value if isinstance(value, Mapping) else {}
    return {
        "title": _text(meta.get("title")),
        "author": _text(meta.get("author")),
        "created_at": _text(meta.get("created_at")),
    }


def _normalize_period(value: Any) -> dict:
    if not isinstance(value, Mapping):
        return dict(DEFAULT_PERIOD)
    start = _text(_pick(value, ("start", "inicio")))
    end = _text(_pick(value, ("end", "fim")))
    if not start and not end:
        return dict(DEFAULT_PERIOD)
    return {"start": start, "end": end}


def _normalize_list(value: Any, default: list[str]) -> list[str]:
    if not isinstance(value, list):
        return list(default)
    return _unique_strings(value)


def _normalize_codes_help(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(code): _text(text) for code, text in value.items()}


def _normalize_officers(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    officers: list[dict] = []
    seen_ids: set[str] = set()
    for item in value:
        if not isinstance(item, Mapping):
            continue
        officer = {field: _text(_pick(item, aliases)) for field, aliases in OFFICER_ALIASES.items()}
        if not all(officer.values()):
            logger.warning("Dropping incomplete officer record: %r", dict(item))
            continue
        if officer["id"] in seen_ids:
            logger.warning("Dropping duplicate officer id: %s", officer["id"])
            continue
        seen_ids.add(officer["id"])
        officers.append(officer)
    return officers


def _normalize_assignments(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    assignments: dict[str, str] = {}
    for key, code in value.items():
        if not isinstance(code, str) or not code.strip():
            continue
        assignments[str(key)] = code.strip()
    return assignments


def _normalize_entries(value: Any, fields: tuple[str, ...]) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [
        {field: _text(item.get(field)) for field in fields}
        for item in value
        if isinstance(item, Mapping)
    ]


def _normalize_signer(value: Any, slot: str) -> dict:
    signer = value if isinstance(value, Mapping) else {}
    result = {field: _text(_pick(signer, aliases)) for field, aliases in SIGNER_ALIASES.items()}
    if not result["role"]:
        result["role"] = DEFAULT_SIGNER_ROLES[slot]
    return result


def _normalize_signatures(value: Any) -> dict:
    signatures = value if isinstance(value, Mapping) else {}
    chefe = signatures.get("chefe_p1")
    sub = signatures.get("subcomandante")

    ciente_raw = signatures.get("ciente")
    if isinstance(ciente_raw, Mapping):
        ciente = {
            "ok": ciente_raw.get("ok") is True,
            "at": _text(ciente_raw.get("at")),
            "by": _text(ciente_raw.get("by")),
        }
    else:
        ciente = {"ok": False, "at": "", "by": ""}
        # Legacy documents stored the acknowledgement on the signer itself
        legacy_at = _text(sub.get("ciente_em")) if isinstance(sub, Mapping) else ""
        if legacy_at:
            ciente = {
                "ok": True,
                "at": legacy_at,
                "by": _text(_pick(sub, SIGNER_ALIASES["name"])),
            }

    return {
        "chefe_p1": _normalize_signer(chefe, "chefe_p1"),
        "subcomandante": _normalize_signer(sub, "subcomandante"),
        "ciente": ciente,
    }


def normalize_document(raw: Mapping) -> dict:
    """Map a decoded document onto the canonical schedule shape.

    Pure and total for any mapping: missing or malformed sections are
    replaced with safe values, so the result always validates as a
    ``ScheduleDocument``. Unknown top-level fields are dropped.

    Args:
        raw: Decoded JSON object as read from storage

    Returns:
        Canonical document dict
    """

    def field(name: str) -> Any:
        return _pick(raw, FIELD_ALIASES[name])

    return {
        "meta": _normalize_meta(field("meta")),
        "period": _normalize_period(field("period")),
        "dates": _normalize_list(field("dates"), DEFAULT_DATES),
        "codes": _normalize_list(field("codes"), DEFAULT_CODES),
        "codes_help": _normalize_codes_help(field("codes_help")),
        "officers": _normalize_officers(field("officers")),
        "assignments": _normalize_assignments(field("assignments")),
        "history": _normalize_entries(field("history"), HISTORY_FIELDS),
        "signatures": _normalize_signatures(field("signatures")),
        "audit": _normalize_entries(field("audit"), AUDIT_FIELDS),
    }
