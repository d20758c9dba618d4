"""
Character classification engine.

A code point is run through an ordered list of detectors; the first detector
that recognizes it decides its label. The order is part of the contract:
whitespace wins over ASCII, ASCII wins over Unicode General Category, emoji
properties win over Hangul and script detection, and so on.

Classification is memoized per classifier instance in a ClassificationCache.
"""

from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional

from .categories import (
    ASCII_DIGITS,
    ASCII_LOWERCASE,
    ASCII_MAX,
    ASCII_PUNCTUATION,
    ASCII_UPPERCASE,
    CJK_RANGES,
    EMOJI_FALLBACK_RANGES,
    FORMAT_EXCEPTIONS,
    GENERAL_CATEGORY_LABELS,
    HANGUL_RANGES,
    LETTER_SUB,
    MAX_CODEPOINT,
    UNKNOWN_SCRIPT_LABEL,
    VARIATION_SELECTOR_RANGES,
    WHITESPACE_MAIN,
    WHITESPACE_SETS,
    RangeTable,
)
from .errors import InvalidArgumentError
from .unicode_utils import (
    EMOJI,
    EMOJI_COMPONENT,
    EXTENDED_PICTOGRAPHIC,
    PropertyMatcher,
    first_scalar_value,
    probe_property_support,
)

GRANULARITY_MAIN = "main"
GRANULARITY_SUB = "sub"


@dataclass(frozen=True)
class CategoryLabel:
    """Classification result: a main category and an optional refinement."""

    main: str
    sub: Optional[str] = None

    def key(self, granularity: str = GRANULARITY_MAIN) -> str:
        """Bucket key: ``main``, or ``main:sub`` at sub granularity when sub exists."""
        if granularity == GRANULARITY_SUB and self.sub:
            return f"{self.main}:{self.sub}"
        return self.main

    def to_dict(self) -> Dict[str, str]:
        if self.sub is None:
            return {"main": self.main}
        return {"main": self.main, "sub": self.sub}


OTHER = CategoryLabel("Other")

# Detector signature: (codepoint, char) -> label or None to fall through
DetectorFn = Callable[[int, str], Optional[CategoryLabel]]


class Detector(NamedTuple):
    name: str
    detect: DetectorFn


class ClassificationCache:
    """Append-only code point -> label memo, safe for concurrent use.

    Lookups and inserts share one lock, so the first stored label for a code
    point is the one every caller sees and the hit/miss counters stay exact.
    """

    def __init__(self) -> None:
        self._labels: Dict[int, CategoryLabel] = {}
        self._lock = Lock()
        self.hits: int = 0
        self.misses: int = 0

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, cp: int) -> bool:
        return cp in self._labels

    def get(self, cp: int) -> Optional[CategoryLabel]:
        with self._lock:
            label = self._labels.get(cp)
            if label is None:
                self.misses += 1
            else:
                self.hits += 1
        return label

    def put(self, cp: int, label: CategoryLabel) -> CategoryLabel:
        """Insert if absent; return whichever label is stored."""
        with self._lock:
            return self._labels.setdefault(cp, label)

    def clear(self) -> None:
        with self._lock:
            self._labels.clear()
            self.hits = 0
            self.misses = 0


def _labels_from_ranges(table: RangeTable) -> DetectorFn:
    cached: Dict[tuple, CategoryLabel] = {}

    def detect(cp: int, char: str) -> Optional[CategoryLabel]:
        hit = table.lookup(cp)
        if hit is None:
            return None
        label = cached.get(hit)
        if label is None:
            label = cached[hit] = CategoryLabel(*hit)
        return label

    return detect


# ===== DETECTORS =====

_WHITESPACE_LABELS = [
    (codepoints, CategoryLabel(WHITESPACE_MAIN, sub))
    for sub, codepoints in WHITESPACE_SETS
]


def detect_whitespace(cp: int, char: str) -> Optional[CategoryLabel]:
    for codepoints, label in _WHITESPACE_LABELS:
        if cp in codepoints:
            return label
    return None


_ASCII_CONTROL = CategoryLabel("Control")
_ASCII_DIGIT = CategoryLabel("Digit", "ASCII")
_ASCII_UPPER = CategoryLabel("Latin", "Uppercase")
_ASCII_LOWER = CategoryLabel("Latin", "Lowercase")
_ASCII_PUNCT = CategoryLabel("Punctuation", "ASCII")
_ASCII_OTHER = CategoryLabel("Other", "ASCII")


def detect_ascii(cp: int, char: str) -> Optional[CategoryLabel]:
    """ASCII fast path; deliberately ignores General Category (``$`` is punctuation)."""
    if cp > ASCII_MAX:
        return None
    if cp <= 0x1F or cp == 0x7F:
        return _ASCII_CONTROL
    if ASCII_DIGITS[0] <= cp <= ASCII_DIGITS[1]:
        return _ASCII_DIGIT
    if ASCII_UPPERCASE[0] <= cp <= ASCII_UPPERCASE[1]:
        return _ASCII_UPPER
    if ASCII_LOWERCASE[0] <= cp <= ASCII_LOWERCASE[1]:
        return _ASCII_LOWER
    if any(start <= cp <= end for start, end in ASCII_PUNCTUATION):
        return _ASCII_PUNCT
    return _ASCII_OTHER


detect_variation_selector = _labels_from_ranges(RangeTable(VARIATION_SELECTOR_RANGES))
detect_hangul = _labels_from_ranges(RangeTable(HANGUL_RANGES))

_EXTENDED_PICTOGRAPHIC = CategoryLabel("Emoji", "Extended Pictographic")
_EMOJI = CategoryLabel("Emoji")
_EMOJI_COMPONENT = CategoryLabel("Emoji", "Emoji Component")


def make_emoji_property_detector(matcher: PropertyMatcher) -> DetectorFn:
    def detect(cp: int, char: str) -> Optional[CategoryLabel]:
        if matcher.supports_extended_pictographic and matcher.has_property(
            char, EXTENDED_PICTOGRAPHIC
        ):
            return _EXTENDED_PICTOGRAPHIC
        if matcher.has_property(char, EMOJI):
            if matcher.has_property(char, EMOJI_COMPONENT):
                return _EMOJI_COMPONENT
            return _EMOJI
        return None

    return detect


_CONTROL = CategoryLabel("Control")
_FORMAT = CategoryLabel("Format")
_FORMAT_EXCEPTIONS = {
    cp: CategoryLabel("Format", sub) for cp, sub in FORMAT_EXCEPTIONS.items()
}
_GENERAL_CATEGORY_LABELS = [
    (prefix, CategoryLabel(main, sub)) for prefix, main, sub in GENERAL_CATEGORY_LABELS
]
_UNKNOWN_SCRIPT = CategoryLabel(*UNKNOWN_SCRIPT_LABEL)


def make_general_category_detector(matcher: PropertyMatcher) -> DetectorFn:
    script_labels: Dict[str, CategoryLabel] = {}

    def detect(cp: int, char: str) -> Optional[CategoryLabel]:
        category = matcher.general_category(cp)
        if category == "Cc":
            return _CONTROL
        if category == "Cf":
            return _FORMAT_EXCEPTIONS.get(cp, _FORMAT)
        if category.startswith("L"):
            script = matcher.script_of(char)
            if script is None:
                return _UNKNOWN_SCRIPT
            label = script_labels.get(script)
            if label is None:
                label = script_labels[script] = CategoryLabel(script, LETTER_SUB)
            return label
        for prefix, label in _GENERAL_CATEGORY_LABELS:
            if category.startswith(prefix):
                return label
        return None

    return detect


class CharacterClassifier:
    """Ordered detector chain with a per-instance memo cache.

    Args:
        property_matching: Force Unicode property matching on or off. ``None``
            probes the regex engine once and uses the result.
        cache: Cache to populate; a fresh one is created when omitted.
    """

    def __init__(
        self,
        property_matching: Optional[bool] = None,
        cache: Optional[ClassificationCache] = None,
    ) -> None:
        if property_matching is None:
            property_matching = probe_property_support()
        self.property_matching: bool = bool(property_matching)
        self.cache: ClassificationCache = (
            cache if cache is not None else ClassificationCache()
        )
        self.matcher: Optional[PropertyMatcher] = (
            PropertyMatcher() if self.property_matching else None
        )
        self.detectors: List[Detector] = self._build_detectors()

    def _build_detectors(self) -> List[Detector]:
        detectors = [
            Detector("whitespace", detect_whitespace),
            Detector("ascii", detect_ascii),
            Detector("variation_selector", detect_variation_selector),
        ]
        if self.matcher is not None:
            detectors.append(
                Detector("emoji_property", make_emoji_property_detector(self.matcher))
            )
        detectors.append(Detector("hangul", detect_hangul))
        if self.matcher is not None:
            detectors.append(
                Detector(
                    "general_category", make_general_category_detector(self.matcher)
                )
            )

        # Without property matching, block ranges stand in for emoji detection
        fallback = list(CJK_RANGES)
        if self.matcher is None:
            fallback.extend(EMOJI_FALLBACK_RANGES)
        detectors.append(
            Detector("range_fallback", _labels_from_ranges(RangeTable(fallback)))
        )
        return detectors

    def classify(self, cp: int, char: Optional[str] = None) -> CategoryLabel:
        """Run the detector chain for one code point, bypassing the cache."""
        if char is None:
            char = chr(cp)
        for detector in self.detectors:
            label = detector.detect(cp, char)
            if label is not None:
                return label
        return OTHER

    def lookup(self, cp: int, char: Optional[str] = None) -> CategoryLabel:
        """Memoized classification of one code point."""
        label = self.cache.get(cp)
        if label is None:
            label = self.cache.put(cp, self.classify(cp, char))
        return label

    def warm(self, codepoints: Iterable[int]) -> None:
        """Populate the cache ahead of time for the given code points."""
        for cp in codepoints:
            if cp not in self.cache:
                self.cache.put(cp, self.classify(cp))


_default_classifier: Optional[CharacterClassifier] = None
_default_lock = Lock()


def get_default_classifier() -> CharacterClassifier:
    """Process-wide classifier used when callers do not pass their own."""
    global _default_classifier
    if _default_classifier is None:
        with _default_lock:
            if _default_classifier is None:
                _default_classifier = CharacterClassifier()
    return _default_classifier


def get_character_type(
    char: str, classifier: Optional[CharacterClassifier] = None
) -> CategoryLabel:
    """Classify the first scalar value of ``char``; the rest is ignored."""
    if not isinstance(char, str) or not char:
        raise InvalidArgumentError("get_character_type expects a non-empty string.")
    cp, first = first_scalar_value(char)
    return (classifier or get_default_classifier()).lookup(cp, first)


def classify_codepoint(
    cp: int, classifier: Optional[CharacterClassifier] = None
) -> CategoryLabel:
    """Classify an integer code point in ``[0, 0x10FFFF]``."""
    if isinstance(cp, bool) or not isinstance(cp, int):
        raise InvalidArgumentError(
            f"Code point must be an int, got {type(cp).__name__}"
        )
    if not 0 <= cp <= MAX_CODEPOINT:
        raise InvalidArgumentError(f"Code point {cp:#x} is outside the Unicode range")
    return (classifier or get_default_classifier()).lookup(cp)
