"""Tests for the status classifier and admin list filters."""

import pytest

from plantilla.status import (
    ESTADO_LABELS,
    classify_status,
    filter_by_estado,
    group_by_estado,
    summarize,
)
from plantilla.types import ESTADOS, FieldDifference, MatchCandidate, MatchResult, RosterEntry

ENTRY = RosterEntry(nombre="Juan", apellidos="Garcia Lopez", categoria="MCB", destino="A")
DIFF = FieldDifference(campo="destino", valor="B", valor_oficial="A")


def test_no_candidate():
    result = classify_status(None)
    assert result == MatchResult(estado="no_en_plantilla")


def test_no_candidate_ignores_differences():
    assert classify_status(None, [DIFF]).estado == "no_en_plantilla"


def test_candidate_without_differences():
    result = classify_status(MatchCandidate(entry=ENTRY, similitud=0.8))
    assert result.estado == "en_plantilla"
    assert result.coincidencia == ENTRY
    assert result.diferencias is None
    assert result.similitud == 0.8


def test_candidate_with_differences():
    result = classify_status(MatchCandidate(entry=ENTRY, similitud=1.0), [DIFF])
    assert result.estado == "cambios_detectados"
    assert result.diferencias == (DIFF,)


def _items():
    return [
        ("a", MatchResult(estado="en_plantilla", coincidencia=ENTRY)),
        ("b", MatchResult(estado="no_en_plantilla")),
        ("c", MatchResult(estado="cambios_detectados", coincidencia=ENTRY, diferencias=(DIFF,))),
        ("d", MatchResult(estado="en_plantilla", coincidencia=ENTRY)),
    ]


class TestFilters:
    def test_todos_returns_everything(self):
        assert [r for r, _ in filter_by_estado(_items())] == ["a", "b", "c", "d"]

    @pytest.mark.parametrize("estado,expected", [
        ("en_plantilla", ["a", "d"]),
        ("cambios_detectados", ["c"]),
        ("no_en_plantilla", ["b"]),
    ])
    def test_filter_by_state(self, estado, expected):
        assert [r for r, _ in filter_by_estado(_items(), estado)] == expected

    def test_unknown_filter_raises(self):
        with pytest.raises(ValueError):
            filter_by_estado(_items(), "pendiente")

    def test_filters_partition_the_set(self):
        items = _items()
        buckets = [
            {r for r, _ in filter_by_estado(items, e)} for e in ESTADOS
        ]
        assert set.union(*buckets) == {r for r, _ in items}
        assert sum(len(b) for b in buckets) == len(items)

    def test_group_has_every_state(self):
        groups = group_by_estado([])
        assert list(groups) == list(ESTADOS)
        assert all(v == [] for v in groups.values())


def test_summarize_counts():
    summary = summarize(result for _, result in _items())
    assert summary.total == 4
    assert summary.por_estado == {
        "en_plantilla": 2,
        "cambios_detectados": 1,
        "no_en_plantilla": 1,
    }


def test_every_state_has_a_label():
    assert set(ESTADO_LABELS) == set(ESTADOS)
