"""Read-only diagnostics for investigating surprising classifications.

Every helper returns plain data; formatting is left to the caller (CLI,
HTTP server, notebooks).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from plantilla.config import MatchConfig
from plantilla.matcher import Matcher
from plantilla.normalize import name_tokens, normalize_text
from plantilla.roster import Roster
from plantilla.scoring import matched_pairs
from plantilla.types import MatchCandidate, MatchResult, RosterEntry, UserIdentityRecord


@dataclass
class CandidateExplanation:
    entry: RosterEntry
    similitud: float
    pares: list[tuple[str, str]] = field(default_factory=list)
    supera_umbral: bool = False


@dataclass
class SearchExplanation:
    nombre: str
    apellidos: str
    tokens: list[str]
    candidatos: list[CandidateExplanation]
    resultado: MatchResult


def ranked_candidates(
    record: UserIdentityRecord,
    roster: Roster,
    top_n: int | None = None,
    config: MatchConfig | None = None,
) -> list[MatchCandidate]:
    """Candidates with a positive score, best first, truncated to ``top_n``."""
    candidates = Matcher(roster, config).rank(record)
    if top_n is not None:
        candidates = candidates[: max(top_n, 0)]
    return candidates


def roster_by_destino(roster: Roster) -> dict[str, list[RosterEntry]]:
    grouped: dict[str, list[RosterEntry]] = {}
    for entry in roster:
        grouped.setdefault(entry.destino, []).append(entry)
    return grouped


def find_by_surname(roster: Roster, fragment: str) -> list[RosterEntry]:
    """Entries whose normalized surnames contain the normalized fragment."""
    needle = normalize_text(fragment)
    if not needle:
        return []
    return [e for e in roster if needle in normalize_text(e.apellidos)]


def explain(
    record: UserIdentityRecord,
    roster: Roster,
    config: MatchConfig | None = None,
    top_n: int | None = None,
) -> SearchExplanation:
    """Step-by-step view of how a record was searched and classified."""
    config = config or MatchConfig()
    matcher = Matcher(roster, config)
    top_n = config.diagnostics.top_n if top_n is None else top_n

    submitted = name_tokens(record.nombre, record.apellidos, config.tokens)
    threshold = config.thresholds.min_similarity

    candidatos: list[CandidateExplanation] = []
    for cand in matcher.rank(record)[: max(top_n, 0)]:
        official = name_tokens(cand.entry.nombre, cand.entry.apellidos, config.tokens)
        candidatos.append(CandidateExplanation(
            entry=cand.entry,
            similitud=cand.similitud,
            pares=matched_pairs(submitted, official),
            supera_umbral=cand.similitud >= threshold,
        ))

    return SearchExplanation(
        nombre=normalize_text(record.nombre),
        apellidos=normalize_text(record.apellidos),
        tokens=sorted(submitted),
        candidatos=candidatos,
        resultado=matcher.classify(record),
    )
