"""Core types for the plantilla roster reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

EstadoPlantilla = Literal["en_plantilla", "cambios_detectados", "no_en_plantilla"]

ESTADOS: tuple[EstadoPlantilla, ...] = (
    "en_plantilla",
    "cambios_detectados",
    "no_en_plantilla",
)


@dataclass(frozen=True)
class RosterEntry:
    nombre: str
    apellidos: str
    categoria: str
    destino: str

    @property
    def is_well_formed(self) -> bool:
        """Both name fields carry text."""
        return bool(self.nombre and self.nombre.strip()) and bool(
            self.apellidos and self.apellidos.strip()
        )

    @property
    def nombre_completo(self) -> str:
        return f"{self.nombre} {self.apellidos}".strip()


@dataclass(frozen=True)
class UserIdentityRecord:
    nombre: str
    apellidos: str | None = None
    destino: str | None = None
    categoria: str | None = None
    id: str | None = None


@dataclass(frozen=True)
class MatchCandidate:
    entry: RosterEntry
    similitud: float


@dataclass(frozen=True)
class FieldDifference:
    campo: str
    valor: str
    valor_oficial: str


@dataclass(frozen=True)
class MatchResult:
    estado: EstadoPlantilla
    coincidencia: RosterEntry | None = None
    diferencias: tuple[FieldDifference, ...] | None = None
    similitud: float | None = None


@dataclass(frozen=True)
class RosterMetadata:
    version: str | None = None
    fecha_actualizacion: str | None = None
    fuente: str | None = None


@dataclass
class RosterStats:
    total: int
    por_destino: dict[str, int] = field(default_factory=dict)
    fecha_actualizacion: str | None = None
