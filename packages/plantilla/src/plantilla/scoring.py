"""Token-overlap scoring of a submitted identity against roster entries."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from plantilla.config import MatchConfig
from plantilla.normalize import name_tokens
from plantilla.types import RosterEntry, UserIdentityRecord

log = structlog.get_logger()


def tokens_match(a: str, b: str) -> bool:
    """Two tokens match when either one contains the other ("garc" / "garcia")."""
    return a in b or b in a


def matched_pairs(
    submitted: Iterable[str], official: Iterable[str]
) -> list[tuple[str, str]]:
    """Pair each submitted token with the first official token it matches.

    Both sides are walked in sorted order so the pairing is deterministic.
    Submitted tokens without a match are left out.
    """
    official_sorted = sorted(official)
    pairs: list[tuple[str, str]] = []
    for token in sorted(submitted):
        for other in official_sorted:
            if tokens_match(token, other):
                pairs.append((token, other))
                break
    return pairs


def score_tokens(submitted: frozenset[str], official: frozenset[str]) -> float:
    """Containment overlap: matched submitted tokens / max(|S|, |R|).

    Not symmetric: only submitted tokens are counted as "common", so swapping
    the two sides can change the score.
    """
    if not submitted or not official:
        return 0.0
    common = sum(
        1 for token in submitted if any(tokens_match(token, o) for o in official)
    )
    return common / max(len(submitted), len(official))


def score(
    submitted: UserIdentityRecord,
    entry: RosterEntry,
    config: MatchConfig | None = None,
) -> float:
    """Similarity in [0, 1] between a submitted identity and a roster entry."""
    config = config or MatchConfig()

    if not entry.is_well_formed:
        log.debug(
            "roster_entry_skipped",
            reason="missing_name_fields",
            nombre=entry.nombre,
            apellidos=entry.apellidos,
            destino=entry.destino,
        )
        return 0.0

    submitted_tokens = name_tokens(submitted.nombre, submitted.apellidos, config.tokens)
    official_tokens = name_tokens(entry.nombre, entry.apellidos, config.tokens)
    return score_tokens(submitted_tokens, official_tokens)
