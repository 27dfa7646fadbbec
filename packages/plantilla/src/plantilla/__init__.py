"""plantilla - Roster reconciliation for self-registered members."""

from plantilla.config import MatchConfig
from plantilla.matcher import Matcher
from plantilla.roster import Roster, RosterLoadError, load_roster
from plantilla.types import (
    ESTADOS,
    EstadoPlantilla,
    FieldDifference,
    MatchCandidate,
    MatchResult,
    RosterEntry,
    UserIdentityRecord,
)

__all__ = [
    "ESTADOS",
    "EstadoPlantilla",
    "FieldDifference",
    "MatchCandidate",
    "MatchConfig",
    "Matcher",
    "MatchResult",
    "Roster",
    "RosterEntry",
    "RosterLoadError",
    "UserIdentityRecord",
    "load_roster",
]
