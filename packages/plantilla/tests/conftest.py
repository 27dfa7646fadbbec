"""Shared fixtures: a small synthetic roster."""

import pytest

from plantilla.roster import Roster
from plantilla.types import RosterEntry, RosterMetadata

ALMANSA = "Parque Comarcal de Almansa"
HELLIN = "Parque Comarcal de Hellín"
COMUNICACIONES = "Central de Comunicaciones"


@pytest.fixture
def roster() -> Roster:
    return Roster.from_entries(
        [
            RosterEntry(nombre="Juan", apellidos="Garcia Lopez", categoria="MCB", destino=ALMANSA),
            RosterEntry(nombre="Pedro", apellidos="García Romero", categoria="Bombero", destino=HELLIN),
            RosterEntry(nombre="José Luis", apellidos="Martínez Ruiz", categoria="Cabo", destino=ALMANSA),
            RosterEntry(nombre="Ana", apellidos="Martin Ruiz", categoria="OACI", destino=COMUNICACIONES),
            RosterEntry(nombre="Ángel", apellidos="Ibáñez Delgado", categoria="Bombero", destino=HELLIN),
            # Malformed: no given name
            RosterEntry(nombre="", apellidos="Sin Nombre", categoria="MCB", destino=COMUNICACIONES),
        ],
        RosterMetadata(version="test-1", fecha_actualizacion="2026-01-15", fuente="tests"),
    )
