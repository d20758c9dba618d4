"""
Per-category character statistics.

Goals of this module:
- Aggregate classifier labels over a whole string into count/ratio/chars buckets.
- Offer a lightweight tracker that combines analyses of several documents.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Set

from .classifier import (
    GRANULARITY_MAIN,
    GRANULARITY_SUB,
    CharacterClassifier,
    get_default_classifier,
)
from .errors import InvalidArgumentError, RangeError
from .unicode_utils import iter_scalar_values

# Module constants
DEFAULT_GRANULARITY = GRANULARITY_MAIN
GRANULARITIES = (GRANULARITY_MAIN, GRANULARITY_SUB)
RATIO_QUANTUM = Decimal("0.01")


@dataclass
class CategoryBucket:
    """Statistics for one label: count, share of total, distinct characters."""

    count: int = 0
    ratio: float = 0.0
    chars: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "ratio": self.ratio, "chars": list(self.chars)}


@dataclass
class TextAnalysis:
    """Result of analyzing one string (or several, via AnalysisTracker)."""

    total: int = 0
    breakdown: Dict[str, CategoryBucket] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "breakdown": {
                label: bucket.to_dict() for label, bucket in self.breakdown.items()
            },
        }


def validate_granularity(granularity: Optional[str]) -> str:
    """Return the effective granularity, raising RangeError for unknown values."""
    if granularity is None:
        return DEFAULT_GRANULARITY
    if granularity not in GRANULARITIES:
        raise RangeError(
            f"granularity must be one of {', '.join(GRANULARITIES)}, "
            f"got {granularity!r}"
        )
    return granularity


def compute_ratio(count: int, total: int) -> float:
    """Percentage of total rounded half up to two decimals; 0 for an empty total.

    Halves are judged on the exact binary value of the float, so 1/800 (0.125)
    becomes 0.13 rather than the 0.12 that ``round`` would give.
    """
    if total <= 0:
        return 0.0
    ratio = Decimal(count * 100 / total)
    return float(ratio.quantize(RATIO_QUANTUM, rounding=ROUND_HALF_UP))


def _finalize(
    total: int, counts: Dict[str, int], chars: Dict[str, Set[str]]
) -> TextAnalysis:
    breakdown = {
        label: CategoryBucket(
            count=count,
            ratio=compute_ratio(count, total),
            chars=sorted(chars[label]),
        )
        for label, count in counts.items()
    }
    return TextAnalysis(total=total, breakdown=breakdown)


def analyze_text(
    text: str,
    granularity: Optional[str] = DEFAULT_GRANULARITY,
    classifier: Optional[CharacterClassifier] = None,
) -> TextAnalysis:
    """Classify every scalar value of text and aggregate per label.

    Args:
        text: String to analyze; may be empty.
        granularity: ``"main"`` buckets by main category, ``"sub"`` by
            ``main:sub`` (bare main when a label has no sub).
        classifier: Classifier to use; defaults to the shared instance.

    Returns:
        TextAnalysis with total and breakdown in first-seen label order. Each
        bucket's ``chars`` is sorted by code point, so astral characters such
        as U+1D11E sort after U+E000..U+FFFF (UTF-16 code unit order would put
        them before).
    """
    if not isinstance(text, str):
        raise InvalidArgumentError(
            f"Input must be a string, got {type(text).__name__}"
        )
    granularity = validate_granularity(granularity)
    classifier = classifier or get_default_classifier()

    counts: Dict[str, int] = {}
    chars: Dict[str, Set[str]] = {}
    total = 0

    for cp, char in iter_scalar_values(text):
        label = classifier.lookup(cp, char).key(granularity)
        if label not in counts:
            counts[label] = 0
            chars[label] = set()
        counts[label] += 1
        chars[label].add(char)
        total += 1

    return _finalize(total, counts, chars)


class AnalysisTracker:
    """Combine analyses of several documents into one breakdown."""

    def __init__(self) -> None:
        self.document_count: int = 0
        self.total: int = 0
        self.counts: Dict[str, int] = {}
        self.chars: Dict[str, Set[str]] = {}

    def add_analysis(self, analysis: TextAnalysis) -> None:
        self.document_count += 1
        self.total += analysis.total

        for label, bucket in analysis.breakdown.items():
            self.counts[label] = self.counts.get(label, 0) + bucket.count
            self.chars.setdefault(label, set()).update(bucket.chars)

    def get_analysis(self) -> TextAnalysis:
        """Combined analysis with ratios recomputed against the overall total."""
        return _finalize(self.total, self.counts, self.chars)
