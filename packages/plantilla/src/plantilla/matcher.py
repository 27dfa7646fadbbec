"""Main orchestration: candidate scoring, resolution, diff and classification."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from plantilla.config import MatchConfig
from plantilla.diff import detect_differences
from plantilla.roster import Roster
from plantilla.scoring import score
from plantilla.status import classify_status
from plantilla.types import MatchCandidate, MatchResult, UserIdentityRecord

log = structlog.get_logger()


class Matcher:
    """Reconciles submitted identities against an injected roster.

    Holds only the roster and the config, both treated as read-only, so one
    instance can be shared across threads and requests.
    """

    def __init__(self, roster: Roster, config: MatchConfig | None = None) -> None:
        self.roster = roster
        self.config = config or MatchConfig()

    def rank(self, record: UserIdentityRecord) -> list[MatchCandidate]:
        """All candidates with a positive score, best first.

        The sort is stable, so equal scores keep roster order.
        """
        candidates: list[MatchCandidate] = []
        for entry in self.roster:
            sim = score(record, entry, self.config)
            if sim > 0:
                candidates.append(MatchCandidate(entry=entry, similitud=sim))

        candidates.sort(key=lambda c: c.similitud, reverse=True)
        return candidates

    def resolve(self, record: UserIdentityRecord) -> MatchCandidate | None:
        """Best candidate if it reaches the acceptance threshold."""
        candidates = self.rank(record)
        if not candidates:
            log.debug("resolve_no_candidates", nombre=record.nombre, apellidos=record.apellidos)
            return None

        best = candidates[0]
        accepted = best.similitud >= self.config.thresholds.min_similarity
        log.debug(
            "resolve_done",
            nombre=record.nombre,
            apellidos=record.apellidos,
            candidate_count=len(candidates),
            best=best.entry.nombre_completo,
            best_score=round(best.similitud, 4),
            accepted=accepted,
        )
        return best if accepted else None

    def classify(self, record: UserIdentityRecord) -> MatchResult:
        """Classify one record as en_plantilla, cambios_detectados or no_en_plantilla."""
        candidate = self.resolve(record)
        differences = (
            detect_differences(record, candidate.entry, self.config.diff)
            if candidate is not None
            else []
        )
        result = classify_status(candidate, differences)
        log.debug(
            "classify_done",
            id=record.id,
            estado=result.estado,
            diferencias=[d.campo for d in result.diferencias or ()],
        )
        return result

    def classify_all(self, records: Iterable[UserIdentityRecord]) -> list[MatchResult]:
        """Classify records in order; results align index by index with input."""
        records = list(records)
        log.info("classify_all_start", count=len(records), roster_size=len(self.roster))
        results = [self.classify(r) for r in records]
        log.info("classify_all_done", count=len(results))
        return results
