"""Authoritative roster: loading, validation and read-only queries."""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from plantilla.types import RosterEntry, RosterMetadata, RosterStats

log = structlog.get_logger()

DEFAULT_ROSTER_PATH = Path("config_data") / "plantilla.json"


class RosterLoadError(Exception):
    """The roster source is missing, unreadable or does not match the schema."""


class _RosterRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    nombre: str = ""
    apellidos: str = ""
    categoria: str = ""

    @field_validator("nombre", "apellidos", "categoria", mode="before")
    @classmethod
    def _text_or_empty(cls, value: object) -> str:
        # Non-text values load as blank; a blank name marks the entry malformed
        return value if isinstance(value, str) else ""


class _RosterMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: str | None = None
    fecha_actualizacion: str | None = Field(default=None, alias="fechaActualizacion")
    fuente: str | None = None


class _RosterFile(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    metadata: _RosterMetadata = Field(default_factory=_RosterMetadata, alias="_metadata")
    destinos: dict[str, list[_RosterRow]]


@dataclass(frozen=True)
class Roster:
    """Immutable, ordered collection of roster entries."""

    entries: tuple[RosterEntry, ...] = ()
    metadata: RosterMetadata = field(default_factory=RosterMetadata)

    @classmethod
    def from_entries(
        cls, entries: Iterable[RosterEntry], metadata: RosterMetadata | None = None
    ) -> Roster:
        return cls(entries=tuple(entries), metadata=metadata or RosterMetadata())

    def __iter__(self) -> Iterator[RosterEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> RosterEntry:
        return self.entries[index]

    @property
    def version(self) -> str | None:
        return self.metadata.version

    def destinos(self) -> list[str]:
        """Distinct work locations in first-seen order."""
        return list(dict.fromkeys(e.destino for e in self.entries))

    def for_destino(self, destino: str) -> list[RosterEntry]:
        return [e for e in self.entries if e.destino == destino]

    def stats(self) -> RosterStats:
        por_destino: dict[str, int] = {}
        for entry in self.entries:
            por_destino[entry.destino] = por_destino.get(entry.destino, 0) + 1
        return RosterStats(
            total=len(self.entries),
            por_destino=por_destino,
            fecha_actualizacion=self.metadata.fecha_actualizacion,
        )


def default_roster_path() -> Path:
    """Roster location from PLANTILLA_ROSTER, else config_data/plantilla.json."""
    env = os.environ.get("PLANTILLA_ROSTER")
    return Path(env) if env else DEFAULT_ROSTER_PATH


def parse_roster(data: object) -> Roster:
    """Build a Roster from the decoded JSON document (grouped by destino)."""
    try:
        parsed = _RosterFile.model_validate(data)
    except ValidationError as e:
        raise RosterLoadError(f"invalid roster document: {e}") from e

    entries: list[RosterEntry] = []
    for destino, rows in parsed.destinos.items():
        for row in rows:
            entries.append(RosterEntry(
                nombre=row.nombre,
                apellidos=row.apellidos,
                categoria=row.categoria,
                destino=destino,
            ))

    malformed = sum(1 for e in entries if not e.is_well_formed)
    if malformed:
        log.warning("roster_malformed_entries", count=malformed)

    metadata = RosterMetadata(
        version=parsed.metadata.version,
        fecha_actualizacion=parsed.metadata.fecha_actualizacion,
        fuente=parsed.metadata.fuente,
    )
    return Roster.from_entries(entries, metadata)


def load_roster(path: str | Path | None = None) -> Roster:
    """Load and validate the roster JSON file."""
    path = Path(path) if path is not None else default_roster_path()
    log.info("roster_load_start", path=str(path))

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise RosterLoadError(f"roster file not found: {path}") from e
    except OSError as e:
        raise RosterLoadError(f"roster file cannot be read: {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise RosterLoadError(f"roster file is not UTF-8: {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise RosterLoadError(f"roster file is not valid JSON: {path}: {e}") from e

    roster = parse_roster(data)
    log.info(
        "roster_load_done",
        total=len(roster),
        destinos=len(roster.destinos()),
        version=roster.version,
    )
    return roster
