"""
Glyphscope: per-code-point Unicode classification and text statistics.

This package labels each character with a main category (script, whitespace
subtype, emoji, punctuation, ...) and aggregates counts, ratios, and distinct
characters per label over whole strings.
"""

from glyphscope.classifier import (
    CategoryLabel,
    CharacterClassifier,
    ClassificationCache,
    classify_codepoint,
    get_character_type,
)
from glyphscope.errors import InvalidArgumentError, RangeError
from glyphscope.metrics import (
    AnalysisTracker,
    CategoryBucket,
    TextAnalysis,
    analyze_text,
)

__all__ = [
    "AnalysisTracker",
    "CategoryBucket",
    "CategoryLabel",
    "CharacterClassifier",
    "ClassificationCache",
    "InvalidArgumentError",
    "RangeError",
    "TextAnalysis",
    "analyze_text",
    "classify_codepoint",
    "get_character_type",
]
