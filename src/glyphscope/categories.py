"""
Category rule data for the character classifier.

Every table here is plain data: code point sets and inclusive ranges paired
with the label they produce. The classifier walks them in a fixed order, so
the order of entries inside each list matters where ranges could overlap.
"""

from bisect import bisect_right
from typing import FrozenSet, List, Optional, Sequence, Tuple

# Inclusive range entry: (start, end, main, sub)
RangeEntry = Tuple[int, int, str, Optional[str]]

MAX_CODEPOINT = 0x10FFFF
ASCII_MAX = 0x7F

# ===== WHITESPACE =====

WHITESPACE_MAIN = "Whitespace"

# Tested top to bottom; U+200B is not White_Space in Unicode but is surfaced
# here as an invisible whitespace variant.
WHITESPACE_SETS: List[Tuple[str, FrozenSet[int]]] = [
    ("Invisible:Zero Width", frozenset({0x200B})),
    ("Control:Tab", frozenset({0x0009})),
    (
        "Control:Line Break",
        frozenset({0x000A, 0x000B, 0x000C, 0x000D, 0x0085, 0x2028, 0x2029}),
    ),
    ("Space Separator", frozenset({0x0020, 0x00A0, 0x1680, 0x3000})),
    (
        "Fixed-Width Space",
        frozenset(range(0x2000, 0x200B)) | frozenset({0x202F, 0x205F}),
    ),
]

# ===== ASCII FAST PATH =====

ASCII_DIGITS = (0x30, 0x39)
ASCII_UPPERCASE = (0x41, 0x5A)
ASCII_LOWERCASE = (0x61, 0x7A)
ASCII_PUNCTUATION: List[Tuple[int, int]] = [
    (0x21, 0x2F),
    (0x3A, 0x40),
    (0x5B, 0x60),
    (0x7B, 0x7E),
]

# ===== EMOJI =====

VARIATION_SELECTOR_RANGES: List[RangeEntry] = [
    (0xFE00, 0xFE0F, "Emoji", "Variation Selector"),
    (0xE0100, 0xE01EF, "Emoji", "Variation Selector"),  # Supplement
]

# Block-level approximation used only when property matching is unavailable
EMOJI_FALLBACK_RANGES: List[RangeEntry] = [
    (0x2600, 0x26FF, "Emoji", None),  # Misc symbols
    (0x2700, 0x27BF, "Emoji", None),  # Dingbats
    (0x1F1E6, 0x1F1FF, "Emoji", None),  # Regional indicators
    (0x1F300, 0x1F5FF, "Emoji", None),  # Symbols & pictographs
    (0x1F600, 0x1F64F, "Emoji", None),  # Emoticons
    (0x1F680, 0x1F6FF, "Emoji", None),  # Transport & map
    (0x1F900, 0x1F9FF, "Emoji", None),  # Supplemental pictographs
    (0x1FA70, 0x1FAFF, "Emoji", None),  # Extended pictographs-A
]

# ===== HANGUL =====

HANGUL_RANGES: List[RangeEntry] = [
    (0xAC00, 0xD7A3, "Hangul", "Syllable"),
    (0x1100, 0x11FF, "Hangul", "Jamo"),
    (0xA960, 0xA97F, "Hangul", "Jamo Extended-A"),
    (0xD7B0, 0xD7FF, "Hangul", "Jamo Extended-B"),
    (0x3130, 0x318F, "Hangul", "Compatibility Jamo"),
]

# ===== CJK UNIFIED IDEOGRAPHS =====

HAN_IDEOGRAPH = "Han Ideograph"

CJK_RANGES: List[RangeEntry] = [
    (0x4E00, 0x9FFF, HAN_IDEOGRAPH, None),
    (0x3400, 0x4DBF, HAN_IDEOGRAPH, None),  # Ext-A
    (0x20000, 0x2A6DF, HAN_IDEOGRAPH, None),  # Ext-B
    (0x2A700, 0x2B73F, HAN_IDEOGRAPH, None),  # Ext-C
    (0x2B740, 0x2B81F, HAN_IDEOGRAPH, None),  # Ext-D
    (0x2B820, 0x2CEAF, HAN_IDEOGRAPH, None),  # Ext-E
    (0x2CEB0, 0x2EBEF, HAN_IDEOGRAPH, None),  # Ext-F
    (0x30000, 0x3134F, HAN_IDEOGRAPH, None),  # Ext-G
    (0x31350, 0x323AF, HAN_IDEOGRAPH, None),  # Ext-H
    (0x2EBF0, 0x2EE5F, HAN_IDEOGRAPH, None),  # Ext-I
    (0x323B0, 0x3347F, HAN_IDEOGRAPH, None),  # Ext-J
]

# ===== GENERAL CATEGORY =====

FORMAT_EXCEPTIONS = {
    0x200D: "ZWJ",
    0x200C: "ZWNJ",
    0xFEFF: "BOM/ZWNBS",
}

# Order matters: Nd must be tested before the broader N
GENERAL_CATEGORY_LABELS: List[Tuple[str, str, Optional[str]]] = [
    ("M", "Mark", None),
    ("Nd", "Digit", "Decimal"),
    ("N", "Number", None),
    ("P", "Punctuation", None),
    ("S", "Symbol", None),
    ("Z", "Separator", None),
]

LETTER_SUB = "Letter"
UNKNOWN_SCRIPT_LABEL = ("Letter", "Other Script")

# ===== SCRIPTS =====

# (label, script aliases). Order matters: the first script that matches wins.
# Aliases cover names that changed between Unicode versions; an alias the
# property matcher does not know is skipped.
SCRIPT_TABLE: List[Tuple[str, Tuple[str, ...]]] = [
    ("Hangul", ("Hangul",)),
    (HAN_IDEOGRAPH, ("Han",)),
    ("Hiragana", ("Hiragana",)),
    ("Katakana", ("Katakana",)),
    ("Bopomofo", ("Bopomofo",)),
    ("Latin", ("Latin",)),
    ("Greek", ("Greek",)),
    ("Cyrillic", ("Cyrillic",)),
    ("Hebrew", ("Hebrew",)),
    ("Arabic", ("Arabic",)),
    ("Devanagari", ("Devanagari",)),
    ("Bengali", ("Bengali",)),
    ("Gurmukhi", ("Gurmukhi",)),
    ("Gujarati", ("Gujarati",)),
    ("Odia", ("Odia", "Oriya")),
    ("Tamil", ("Tamil",)),
    ("Telugu", ("Telugu",)),
    ("Kannada", ("Kannada",)),
    ("Malayalam", ("Malayalam",)),
    ("Sinhala", ("Sinhala",)),
    ("Thai", ("Thai",)),
    ("Lao", ("Lao",)),
    ("Khmer", ("Khmer",)),
    ("Myanmar", ("Myanmar",)),
    ("Tibetan", ("Tibetan",)),
    ("Mongolian", ("Mongolian",)),
    ("Armenian", ("Armenian",)),
    ("Georgian", ("Georgian",)),
    ("Ethiopic", ("Ethiopic",)),
    ("Cherokee", ("Cherokee",)),
    ("Canadian Aboriginal", ("Canadian_Aboriginal",)),
    ("Runic", ("Runic",)),
    ("Ogham", ("Ogham",)),
    ("Yi", ("Yi",)),
]


class RangeTable:
    """Sorted, non-overlapping inclusive ranges with binary-search lookup."""

    def __init__(self, entries: Sequence[RangeEntry]) -> None:
        self._entries: List[RangeEntry] = sorted(entries, key=lambda e: e[0])
        for prev, cur in zip(self._entries, self._entries[1:]):
            if cur[0] <= prev[1]:
                raise ValueError(
                    f"Overlapping ranges U+{prev[0]:04X}-U+{prev[1]:04X} "
                    f"and U+{cur[0]:04X}-U+{cur[1]:04X}"
                )
        self._starts: List[int] = [entry[0] for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, cp: int) -> Optional[Tuple[str, Optional[str]]]:
        """Return (main, sub) of the range containing cp, or None."""
        idx = bisect_right(self._starts, cp) - 1
        if idx < 0:
            return None
        start, end, main, sub = self._entries[idx]
        if start <= cp <= end:
            return main, sub
        return None
