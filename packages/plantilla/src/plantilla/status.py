"""Final classification states and the admin list filters built on them."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from plantilla.types import (
    ESTADOS,
    EstadoPlantilla,
    FieldDifference,
    MatchCandidate,
    MatchResult,
)

R = TypeVar("R")

FILTRO_TODOS = "todos"

ESTADO_LABELS: dict[EstadoPlantilla, str] = {
    "en_plantilla": "En plantilla",
    "cambios_detectados": "Cambios detectados",
    "no_en_plantilla": "No en plantilla",
}


def classify_status(
    candidate: MatchCandidate | None,
    differences: Sequence[FieldDifference] = (),
) -> MatchResult:
    """Map a resolved candidate and its differences to a MatchResult."""
    if candidate is None:
        return MatchResult(estado="no_en_plantilla")

    if differences:
        return MatchResult(
            estado="cambios_detectados",
            coincidencia=candidate.entry,
            diferencias=tuple(differences),
            similitud=candidate.similitud,
        )

    return MatchResult(
        estado="en_plantilla",
        coincidencia=candidate.entry,
        similitud=candidate.similitud,
    )


def filter_by_estado(
    items: Iterable[tuple[R, MatchResult]], filtro: str = FILTRO_TODOS
) -> list[tuple[R, MatchResult]]:
    """Keep the (record, result) pairs shown under an admin list filter."""
    if filtro != FILTRO_TODOS and filtro not in ESTADOS:
        raise ValueError(
            f"unknown filter {filtro!r}; expected {FILTRO_TODOS!r} or one of {ESTADOS}"
        )
    items = list(items)
    if filtro == FILTRO_TODOS:
        return items
    return [(record, result) for record, result in items if result.estado == filtro]


def group_by_estado(
    items: Iterable[tuple[R, MatchResult]],
) -> dict[EstadoPlantilla, list[tuple[R, MatchResult]]]:
    """Partition pairs into one bucket per state (every state present)."""
    groups: dict[EstadoPlantilla, list[tuple[R, MatchResult]]] = {e: [] for e in ESTADOS}
    for record, result in items:
        groups[result.estado].append((record, result))
    return groups


@dataclass
class ClassificationSummary:
    """Counts of classified records per state."""

    total: int = 0
    por_estado: dict[str, int] = field(default_factory=lambda: {e: 0 for e in ESTADOS})


def summarize(results: Iterable[MatchResult]) -> ClassificationSummary:
    summary = ClassificationSummary()
    for result in results:
        summary.total += 1
        summary.por_estado[result.estado] += 1
    return summary
