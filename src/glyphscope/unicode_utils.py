"""
Unicode property matching and scalar-value utilities.

This module wraps the ``regex`` library's ``\\p{...}`` support behind a small
matcher object used by the classifier for emoji properties and script
detection, and provides helpers for walking text by Unicode scalar value.
"""

import unicodedata
from functools import lru_cache
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import regex

from .categories import SCRIPT_TABLE

# Probe pattern used to decide whether property escapes work at all
CAPABILITY_PROBE = r"\p{L}"

EXTENDED_PICTOGRAPHIC = "Extended_Pictographic"
EMOJI = "Emoji"
EMOJI_COMPONENT = "Emoji_Component"

HIGH_SURROGATES = (0xD800, 0xDBFF)
LOW_SURROGATES = (0xDC00, 0xDFFF)


@lru_cache(maxsize=None)
def compile_property(expression: str) -> Optional["regex.Pattern"]:
    """Compile a ``\\p{...}`` expression, or return None if it is unknown."""
    try:
        return regex.compile(r"\p{" + expression + "}")
    except regex.error:
        return None


@lru_cache(maxsize=1)
def probe_property_support() -> bool:
    """Check once whether the regex engine accepts Unicode property escapes."""
    try:
        return regex.compile(CAPABILITY_PROBE).match("a") is not None
    except regex.error:
        return False


class PropertyMatcher:
    """Unicode property and script queries over single characters."""

    def __init__(
        self, script_table: Sequence[Tuple[str, Sequence[str]]] = SCRIPT_TABLE
    ) -> None:
        self.supports_extended_pictographic = (
            compile_property(EXTENDED_PICTOGRAPHIC) is not None
        )

        self._properties: Dict[str, Optional["regex.Pattern"]] = {
            name: compile_property(name)
            for name in (EXTENDED_PICTOGRAPHIC, EMOJI, EMOJI_COMPONENT)
        }

        # Flatten aliases into (label, pattern); unknown aliases are dropped
        self._scripts: List[Tuple[str, "regex.Pattern"]] = []
        for label, aliases in script_table:
            for alias in aliases:
                pattern = compile_property(f"Script={alias}")
                if pattern is not None:
                    self._scripts.append((label, pattern))

    @property
    def script_count(self) -> int:
        return len(self._scripts)

    @property
    def script_labels(self) -> List[str]:
        """Labels with at least one usable alias, in table order."""
        return list(dict.fromkeys(label for label, _ in self._scripts))

    def has_property(self, char: str, name: str) -> bool:
        """True if char has the binary property ``name``; False if unsupported."""
        pattern = self._properties.get(name)
        if pattern is None:
            pattern = compile_property(name)
        return pattern is not None and pattern.match(char) is not None

    def script_of(self, char: str) -> Optional[str]:
        """Return the label of the first script in table order containing char."""
        for label, pattern in self._scripts:
            if pattern.match(char):
                return label
        return None

    @staticmethod
    def general_category(cp: int) -> str:
        """Two-letter General Category of a code point (e.g. ``Lu``, ``Cf``)."""
        return unicodedata.category(chr(cp))


def _is_high_surrogate(cp: int) -> bool:
    return HIGH_SURROGATES[0] <= cp <= HIGH_SURROGATES[1]


def _is_low_surrogate(cp: int) -> bool:
    return LOW_SURROGATES[0] <= cp <= LOW_SURROGATES[1]


def _combine_surrogates(high: int, low: int) -> int:
    return 0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00)


def iter_scalar_values(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (codepoint, char) for each scalar value in text.

    Python strings are already indexed by code point, but text decoded with
    ``surrogatepass`` can still carry UTF-16 surrogate pairs; those are
    combined so a pair is never split. Unpaired surrogates pass through as-is.
    """
    i = 0
    length = len(text)
    while i < length:
        cp = ord(text[i])
        if _is_high_surrogate(cp) and i + 1 < length:
            nxt = ord(text[i + 1])
            if _is_low_surrogate(nxt):
                combined = _combine_surrogates(cp, nxt)
                yield combined, chr(combined)
                i += 2
                continue
        yield cp, text[i]
        i += 1


def first_scalar_value(text: str) -> Tuple[int, str]:
    """Return (codepoint, char) of the first scalar value of a non-empty string."""
    return next(iter_scalar_values(text))
