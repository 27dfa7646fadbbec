"""Tests for the read-only diagnostics."""

from plantilla.config import MatchConfig
from plantilla.diagnostics import explain, find_by_surname, ranked_candidates, roster_by_destino
from plantilla.types import UserIdentityRecord


class TestRankedCandidates:
    def test_unknown_name_has_no_candidates(self, roster):
        record = UserIdentityRecord(nombre="Zzyx", apellidos="Qqwrt")
        assert ranked_candidates(record, roster, 5) == []

    def test_sorted_and_truncated(self, roster):
        record = UserIdentityRecord(nombre="Juan", apellidos="Garcia Romero")
        everything = ranked_candidates(record, roster)
        top_one = ranked_candidates(record, roster, 1)
        assert len(everything) == 2
        assert top_one == everything[:1]
        assert [c.similitud for c in everything] == sorted(
            (c.similitud for c in everything), reverse=True
        )

    def test_includes_candidates_below_threshold(self, roster):
        record = UserIdentityRecord(nombre="Pedro", apellidos="Sanchez")
        candidates = ranked_candidates(record, roster, 5)
        assert [c.entry.nombre for c in candidates] == ["Pedro"]

    def test_zero_top_n(self, roster):
        record = UserIdentityRecord(nombre="Juan", apellidos="Garcia Lopez")
        assert ranked_candidates(record, roster, 0) == []


def test_roster_by_destino_keeps_order(roster):
    grouped = roster_by_destino(roster)
    assert list(grouped) == [
        "Parque Comarcal de Almansa",
        "Parque Comarcal de Hellín",
        "Central de Comunicaciones",
    ]
    assert [e.nombre for e in grouped["Parque Comarcal de Almansa"]] == ["Juan", "José Luis"]
    assert sum(len(v) for v in grouped.values()) == len(roster)


class TestFindBySurname:
    def test_accent_insensitive(self, roster):
        found = find_by_surname(roster, "garcía")
        assert [e.nombre for e in found] == ["Juan", "Pedro"]

    def test_case_insensitive_substring(self, roster):
        assert [e.nombre for e in find_by_surname(roster, "RUIZ")] == ["José Luis", "Ana"]
        assert [e.nombre for e in find_by_surname(roster, "iban")] == ["Ángel"]

    def test_blank_fragment(self, roster):
        assert find_by_surname(roster, "") == []
        assert find_by_surname(roster, "  ") == []

    def test_no_match(self, roster):
        assert find_by_surname(roster, "Zzyx") == []


class TestExplain:
    def test_explains_match(self, roster):
        record = UserIdentityRecord(nombre="JUAN", apellidos="Garc López", destino="Hellín")
        exp = explain(record, roster)

        assert exp.nombre == "juan"
        assert exp.apellidos == "garc lopez"
        assert exp.tokens == ["garc", "juan", "lopez"]

        best = exp.candidatos[0]
        assert best.entry.apellidos == "Garcia Lopez"
        assert best.similitud == 1.0
        assert best.supera_umbral
        assert best.pares == [("garc", "garcia"), ("juan", "juan"), ("lopez", "lopez")]

        assert exp.resultado.estado == "cambios_detectados"

    def test_flags_candidates_under_threshold(self, roster):
        record = UserIdentityRecord(nombre="Pedro", apellidos="Sanchez")
        exp = explain(record, roster)
        assert [c.supera_umbral for c in exp.candidatos] == [False]
        assert exp.resultado.estado == "no_en_plantilla"

    def test_respects_configured_top_n(self, roster):
        config = MatchConfig()
        config.diagnostics.top_n = 1
        record = UserIdentityRecord(nombre="Juan", apellidos="Garcia Romero")
        assert len(explain(record, roster, config).candidatos) == 1
