"""Text normalization and tokenization for name comparison."""

from __future__ import annotations

import re
import unicodedata

from plantilla.config import TokenConfig

# Separators that commonly join surname parts ("Garcia-Lopez", "Lopez, Ana")
_SEPARATORS = re.compile(r"[,.\-_'\"´`]")
_NON_ALNUM = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: object) -> str:
    """Canonical case- and accent-insensitive form of ``text``.

    Non-string input (None, numbers, ...) normalizes to the empty string.
    """
    if not isinstance(text, str):
        return ""

    s = text.casefold()

    # Decompose and drop combining marks: "Á" -> "a", "ñ" -> "n"
    s = unicodedata.normalize("NFD", s)
    s = "".join(ch for ch in s if unicodedata.category(ch) != "Mn")

    s = _SEPARATORS.sub(" ", s)
    s = _NON_ALNUM.sub("", s)
    return _WHITESPACE.sub(" ", s).strip()


def tokenize(text: object, config: TokenConfig | None = None) -> frozenset[str]:
    """Split normalized text into comparable word tokens."""
    config = config or TokenConfig()
    normalized = normalize_text(text)
    if not normalized:
        return frozenset()
    return frozenset(
        t for t in normalized.split(" ") if len(t) >= config.min_token_length
    )


def name_tokens(
    nombre: object, apellidos: object = None, config: TokenConfig | None = None
) -> frozenset[str]:
    """Tokens of a full name (given name plus surnames)."""
    return tokenize(f"{normalize_text(nombre)} {normalize_text(apellidos)}", config)
