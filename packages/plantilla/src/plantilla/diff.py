"""Field-level difference detection between a submission and its roster match."""

from __future__ import annotations

from plantilla.config import DiffConfig
from plantilla.normalize import normalize_text
from plantilla.types import FieldDifference, RosterEntry, UserIdentityRecord


def _values_equal(submitted: str, official: str, containment: bool) -> bool:
    a = normalize_text(submitted)
    b = normalize_text(official)
    if a == b:
        return True
    if containment and a and b:
        return a in b or b in a
    return False


def detect_differences(
    submitted: UserIdentityRecord,
    entry: RosterEntry,
    config: DiffConfig | None = None,
) -> list[FieldDifference]:
    """List compared fields whose submitted value differs from the roster.

    Fields the submitter left empty are not compared. Values are compared in
    normalized form, so case and accents never produce a difference.
    """
    config = config or DiffConfig()
    differences: list[FieldDifference] = []

    for campo in config.fields:
        valor = getattr(submitted, campo, None)
        if not isinstance(valor, str) or not valor.strip():
            continue
        valor_oficial = getattr(entry, campo, "") or ""
        if not _values_equal(valor, valor_oficial, campo in config.containment_fields):
            differences.append(FieldDifference(
                campo=campo,
                valor=valor,
                valor_oficial=valor_oficial,
            ))

    return differences
