"""Tests for escala.board.normalize."""

from hypothesis import given
from hypothesis import strategies as st

from escala.board.models import ScheduleDocument
from escala.board.normalize import normalize_document
from escala.board.seed import DEFAULT_CODES, DEFAULT_DATES, DEFAULT_PERIOD, default_document


class TestCanonicalDocuments:
    def test_canonical_document_is_unchanged(self, make_doc):
        doc = make_doc()
        assert normalize_document(doc) == doc

    def test_seed_document_is_canonical(self):
        seed = default_document()
        assert normalize_document(seed) == seed

    def test_idempotent(self, make_doc):
        once = normalize_document(make_doc(legend={"FO": "folga"}))
        assert normalize_document(once) == once


class TestFallbacks:
    def test_empty_document_gets_defaults(self):
        result = normalize_document({})

        assert result["period"] == DEFAULT_PERIOD
        assert result["dates"] == DEFAULT_DATES
        assert result["codes"] == DEFAULT_CODES
        assert result["officers"] == []
        assert result["assignments"] == {}
        assert result["history"] == []
        assert result["audit"] == []
        assert result["signatures"]["ciente"] == {"ok": False, "at": "", "by": ""}

    def test_malformed_dates_fall_back(self):
        assert normalize_document({"dates": "2026-02-23"})["dates"] == DEFAULT_DATES

    def test_present_empty_lists_are_kept(self):
        result = normalize_document({"dates": [], "codes": []})
        assert result["dates"] == []
        assert result["codes"] == []

    def test_duplicate_dates_removed_keeping_order(self):
        result = normalize_document({"dates": ["2026-02-24", "2026-02-23", "2026-02-24"]})
        assert result["dates"] == ["2026-02-24", "2026-02-23"]

    def test_malformed_assignments_become_empty(self):
        assert normalize_document({"assignments": ["o1|2026-02-23"]})["assignments"] == {}

    def test_assignment_entries_with_bad_values_dropped(self):
        result = normalize_document(
            {"assignments": {"o1|2026-02-23": "FO", "o1|2026-02-24": 3, "o2|2026-02-23": ""}}
        )
        assert result["assignments"] == {"o1|2026-02-23": "FO"}

    def test_malformed_history_becomes_empty(self):
        assert normalize_document({"history": {"at": "x"}})["history"] == []

    def test_history_entries_coerced(self):
        result = normalize_document(
            {"history": ["junk", {"at": "t", "user": "Ana", "officerId": "o1", "from": None}]}
        )
        assert result["history"] == [
            {
                "at": "t",
                "user": "Ana",
                "reason": "",
                "officerId": "o1",
                "date": "",
                "from": "",
                "to": "",
            }
        ]


class TestLegacyAliases:
    def test_officer_posto_nome(self):
        result = normalize_document(
            {"officers": [{"id": "o1", "posto": "Ten Cel PM", "nome": "NOME 01"}]}
        )
        assert result["officers"] == [{"id": "o1", "rank": "Ten Cel PM", "name": "NOME 01"}]

    def test_canonical_name_wins_over_alias(self):
        result = normalize_document(
            {"officers": [{"id": "o1", "rank": "Cap", "posto": "Maj", "name": "A", "nome": "B"}]}
        )
        assert result["officers"][0] == {"id": "o1", "rank": "Cap", "name": "A"}

    def test_legend_becomes_codes_help(self):
        result = normalize_document({"codes": ["FO"], "legend": {"FO": "folga"}})
        assert result["codes_help"] == {"FO": "folga"}

    def test_portuguese_section_names(self):
        result = normalize_document(
            {
                "datas": ["2026-02-23"],
                "codigos": ["FO"],
                "legenda": {"FO": "folga"},
                "oficiais": [{"id": "o1", "posto": "Cap", "nome": "Ana"}],
                "escala": {"o1|2026-02-23": "FO"},
                "historico": [{"at": "t", "user": "u"}],
            }
        )
        assert result["dates"] == ["2026-02-23"]
        assert result["codes"] == ["FO"]
        assert result["codes_help"] == {"FO": "folga"}
        assert result["officers"][0]["rank"] == "Cap"
        assert result["assignments"] == {"o1|2026-02-23": "FO"}
        assert result["history"][0]["user"] == "u"

    def test_legacy_signatures(self):
        result = normalize_document(
            {
                "signatures": {
                    "chefe_p1": {"nome": "Cap PM Alberto", "assinado_em": ""},
                    "subcomandante": {"nome": "Maj PM Mozna", "ciente_em": ""},
                }
            }
        )
        sigs = result["signatures"]
        assert sigs["chefe_p1"] == {"name": "Cap PM Alberto", "role": "Chefe P/1"}
        assert sigs["subcomandante"] == {"name": "Maj PM Mozna", "role": "Subcomandante"}
        assert sigs["ciente"]["ok"] is False

    def test_legacy_ciente_em_becomes_acknowledged(self):
        result = normalize_document(
            {"signatures": {"subcomandante": {"nome": "Maj PM Mozna", "ciente_em": "2026-02-27"}}}
        )
        assert result["signatures"]["ciente"] == {
            "ok": True,
            "at": "2026-02-27",
            "by": "Maj PM Mozna",
        }

    def test_unknown_top_level_fields_dropped(self, make_doc):
        assert "legacy_flag" not in normalize_document(make_doc(legacy_flag=True))


class TestOfficers:
    def test_incomplete_officers_dropped(self):
        result = normalize_document(
            {
                "officers": [
                    {"id": "o1", "rank": "Cap", "name": "Ana"},
                    {"id": "", "rank": "Cap", "name": "Sem id"},
                    {"id": "o3", "name": "Sem posto"},
                    {"id": "o4", "rank": "Maj"},
                    "not-an-officer",
                ]
            }
        )
        assert [o["id"] for o in result["officers"]] == ["o1"]

    def test_numeric_ids_become_strings(self):
        result = normalize_document({"officers": [{"id": 7, "rank": "Cap", "name": "Ana"}]})
        assert result["officers"][0]["id"] == "7"

    def test_duplicate_ids_keep_first(self):
        result = normalize_document(
            {
                "officers": [
                    {"id": "o1", "rank": "Cap", "name": "Ana"},
                    {"id": "o1", "rank": "Maj", "name": "Bruno"},
                ]
            }
        )
        assert result["officers"] == [{"id": "o1", "rank": "Cap", "name": "Ana"}]


json_scalars = st.none() | st.booleans() | st.integers() | st.text(max_size=10)
json_values = st.recursive(
    json_scalars,
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=12,
)
section_names = st.sampled_from(
    [
        "meta",
        "period",
        "dates",
        "datas",
        "codes",
        "codes_help",
        "legend",
        "officers",
        "oficiais",
        "assignments",
        "escala",
        "history",
        "signatures",
        "audit",
    ]
)


class TestTotality:
    @given(raw=st.dictionaries(section_names, json_values, max_size=8))
    def test_any_object_normalizes_to_valid_document(self, raw):
        canonical = normalize_document(raw)
        document = ScheduleDocument.from_json(canonical)
        assert document.to_json() == canonical
