"""CSV/JSONL input of user records and flat rows for tabular output."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from plantilla.status import ESTADO_LABELS
from plantilla.types import MatchResult, UserIdentityRecord


def read_records(path: str | Path) -> list[UserIdentityRecord]:
    """Read user identity records from CSV or JSONL.

    Rows without a ``nombre`` are skipped; blank optional fields become None.
    """
    path = Path(path)

    if path.suffix == ".jsonl":
        rows = _read_jsonl(path)
    else:
        rows = _read_csv(path)

    records: list[UserIdentityRecord] = []
    for row in rows:
        record = _to_record(row)
        if record is not None:
            records.append(record)
    return records


def _read_csv(path: Path) -> list[dict[str, Any]]:
    with path.open(newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def _read_jsonl(path: Path) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    with path.open(encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            rows.append(json.loads(line))
    return rows


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_record(row: dict[str, Any]) -> UserIdentityRecord | None:
    nombre = _clean(row.get("nombre"))
    if not nombre:
        return None
    return UserIdentityRecord(
        nombre=nombre,
        apellidos=_clean(row.get("apellidos")),
        destino=_clean(row.get("destino")),
        categoria=_clean(row.get("categoria")),
        id=_clean(row.get("id")),
    )


def result_to_row(record: UserIdentityRecord, result: MatchResult) -> dict[str, Any]:
    """Flatten a classified record into one display row."""
    match = result.coincidencia
    return {
        "id": record.id,
        "nombre": record.nombre,
        "apellidos": record.apellidos,
        "estado": result.estado,
        "badge": ESTADO_LABELS[result.estado],
        "similitud": round(result.similitud, 4) if result.similitud is not None else None,
        "oficial": match.nombre_completo if match else None,
        "destino_oficial": match.destino if match else None,
        "categoria_oficial": match.categoria if match else None,
        "diferencias": "; ".join(
            f"{d.campo}: {d.valor} -> {d.valor_oficial}" for d in result.diferencias or ()
        ),
    }
