"""Configuration for the plantilla reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TokenConfig:
    min_token_length: int = 3  # shorter tokens are initials or connectors ("de", "la")


@dataclass
class Thresholds:
    min_similarity: float = 0.5


@dataclass
class DiffConfig:
    fields: list[str] = field(default_factory=lambda: ["destino", "categoria"])
    # Fields where one normalized value containing the other counts as equal
    containment_fields: list[str] = field(default_factory=list)


@dataclass
class DiagnosticsConfig:
    top_n: int = 5


@dataclass
class MatchConfig:
    tokens: TokenConfig = field(default_factory=TokenConfig)
    thresholds: Thresholds = field(default_factory=Thresholds)
    diff: DiffConfig = field(default_factory=DiffConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
