#!/usr/bin/env python3
"""CLI for running glyphscope character analysis."""

import json
import sys
from typing import Any, Dict, List, Optional, TextIO

from omegaconf import OmegaConf

from .classifier import CharacterClassifier
from .data_utils import (
    DEFAULT_ENCODING,
    analysis_to_dataframe,
    load_text_files,
    save_analysis,
)
from .errors import InvalidArgumentError, RangeError
from .metrics import (
    DEFAULT_GRANULARITY,
    AnalysisTracker,
    TextAnalysis,
    analyze_text,
    validate_granularity,
)

# Default configuration constants
DEFAULT_FORMAT = "table"
OUTPUT_FORMATS = ("table", "json", "csv")
INLINE_TEXT_NAME = "<text>"

# Output formatting constants
TABLE_WIDTH = 80
RANK_COLUMN_WIDTH = 4
LABEL_COLUMN_WIDTH = 32
COUNT_COLUMN_WIDTH = 9
RATIO_COLUMN_WIDTH = 8
DISTINCT_COLUMN_WIDTH = 9
SAMPLE_CHAR_LIMIT = 8


def parse_config(args: Optional[List[str]] = None) -> Dict[str, Any]:
    """Parse CLI configuration, merged over an optional YAML config file."""
    try:
        config = OmegaConf.from_cli(args)
        if config.get("config"):
            file_config = OmegaConf.load(str(config.get("config")))
            config = OmegaConf.merge(file_config, config)
        values = OmegaConf.to_container(config, resolve=True)
    except Exception as e:
        raise RuntimeError(f"Failed to parse CLI arguments: {e}") from e

    text = values.get("text")
    return {
        "text": None if text is None else str(text),
        "files": parse_files(values.get("files")),
        "granularity": values.get("granularity", DEFAULT_GRANULARITY),
        "format": values.get("format", DEFAULT_FORMAT),
        "output": values.get("output", None),
        "top": parse_top(values.get("top", None)),
        "property_matching": parse_property_matching(
            values.get("property_matching", None)
        ),
        "encoding": values.get("encoding", DEFAULT_ENCODING),
    }


def parse_files(files: Any) -> List[str]:
    """Accept a comma-separated string or a list of paths."""
    if not files:
        return []
    if isinstance(files, str):
        return [f.strip() for f in files.split(",") if f.strip()]
    if isinstance(files, list):
        return [str(f) for f in files]
    return [str(files)]


def parse_property_matching(value: Any) -> Optional[bool]:
    """``auto``/unset probes the regex engine; booleans force the choice."""
    if value is None or isinstance(value, bool):
        return value
    if str(value).lower() == "auto":
        return None
    raise RangeError(f"property_matching must be true, false or auto, got {value!r}")


def parse_top(value: Any) -> Optional[int]:
    """Number of summary rows to show; unset shows every label."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidArgumentError(f"top must be a positive integer, got {value!r}")
    try:
        top = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(
            f"top must be a positive integer, got {value!r}"
        ) from e
    if top < 1:
        raise InvalidArgumentError(f"top must be a positive integer, got {value!r}")
    return top


def validate_format(output_format: Any) -> str:
    if output_format not in OUTPUT_FORMATS:
        raise RangeError(
            f"format must be one of {', '.join(OUTPUT_FORMATS)}, "
            f"got {output_format!r}"
        )
    return output_format


def load_documents(config: Dict[str, Any]) -> Dict[str, str]:
    """Collect inline text and files into one ordered name -> text mapping."""
    documents: Dict[str, str] = {}
    if config["text"] is not None:
        documents[INLINE_TEXT_NAME] = config["text"]
    if config["files"]:
        documents.update(load_text_files(config["files"], config["encoding"]))

    if not documents:
        _print_usage_error()
    return documents


def _print_usage_error(message: Optional[str] = None) -> None:
    """Print usage error and examples."""
    if message:
        print(f"❌ Error: {message}")
    else:
        print("❌ Error: text or files is required")
    print("Examples:")
    print('  Inline:   glyphscope text="Hello 가😊"')
    print("  Files:    glyphscope files=notes.txt,chat.log granularity=sub")
    print("  Export:   glyphscope files=notes.txt format=json output=out/stats.json")
    print("  Config:   glyphscope config=glyphscope.yaml")
    sys.exit(1)


def format_chars(chars: List[str], limit: int = SAMPLE_CHAR_LIMIT) -> str:
    """Render a sample of characters, escaping invisible ones as U+XXXX."""
    shown = [
        c if c.isprintable() and not c.isspace() else f"U+{ord(c):04X}"
        for c in chars[:limit]
    ]
    suffix = " …" if len(chars) > limit else ""
    return " ".join(shown) + suffix


def print_summary(
    analysis: TextAnalysis, top: Optional[int] = None, stream: Optional[TextIO] = None
) -> None:
    """Print the breakdown ranked by count."""
    stream = stream or sys.stdout
    if not analysis.total:
        print("⚠️  No characters to analyze", file=stream)
        return

    print(f"📊 Character Summary ({analysis.total:,} characters):", file=stream)
    print(
        f"{'Rank':>{RANK_COLUMN_WIDTH}} {'Label':<{LABEL_COLUMN_WIDTH}} "
        f"{'Count':>{COUNT_COLUMN_WIDTH}} {'Ratio':>{RATIO_COLUMN_WIDTH}} "
        f"{'Distinct':>{DISTINCT_COLUMN_WIDTH}}  Sample",
        file=stream,
    )
    print("─" * TABLE_WIDTH, file=stream)

    ranked = sorted(
        analysis.breakdown.items(), key=lambda item: (-item[1].count, item[0])
    )
    if top:
        ranked = ranked[:top]

    for i, (label, bucket) in enumerate(ranked, 1):
        print(
            f"  {i:2d}. {label:<{LABEL_COLUMN_WIDTH}} "
            f"{bucket.count:>{COUNT_COLUMN_WIDTH},d} "
            f"{bucket.ratio:>{RATIO_COLUMN_WIDTH - 1}.2f}% "
            f"{len(bucket.chars):>{DISTINCT_COLUMN_WIDTH},d}  "
            f"{format_chars(bucket.chars)}",
            file=stream,
        )


def print_configuration(
    documents: Dict[str, str],
    granularity: str,
    classifier: CharacterClassifier,
    stream: TextIO,
) -> None:
    """Print analysis configuration."""
    if len(documents) == 1:
        print(f"Input: {next(iter(documents))}", file=stream)
    else:
        print(f"Inputs ({len(documents)}):", file=stream)
        for i, name in enumerate(documents, 1):
            print(f"  {i}. {name}", file=stream)
    print(f"Granularity: {granularity}", file=stream)
    print(
        f"Property matching: {'on' if classifier.property_matching else 'off'}",
        file=stream,
    )
    print("-" * 50, file=stream)


def run_analysis(
    documents: Dict[str, str],
    granularity: str,
    classifier: CharacterClassifier,
) -> TextAnalysis:
    """Analyze each document and combine them into one breakdown."""
    tracker = AnalysisTracker()
    for text in documents.values():
        tracker.add_analysis(analyze_text(text, granularity, classifier=classifier))
    return tracker.get_analysis()


def main(args: Optional[List[str]] = None) -> None:
    """Main CLI function."""
    try:
        config = parse_config(args)
        output_format = validate_format(config["format"])
        granularity = validate_granularity(config["granularity"])

        # Keep stdout clean for machine-readable formats
        status = sys.stdout if output_format == DEFAULT_FORMAT else sys.stderr
        print("🚀 Starting glyphscope", file=status)

        documents = load_documents(config)

        classifier = CharacterClassifier(property_matching=config["property_matching"])
        if not classifier.property_matching:
            print(
                "⚠️  Unicode property matching unavailable; "
                "using range fallback for scripts and emoji",
                file=status,
            )
        print_configuration(documents, granularity, classifier, status)

        print("🔄 Analyzing text...", file=status)
        analysis = run_analysis(documents, granularity, classifier)

        if output_format == "json":
            print(json.dumps(analysis.to_dict(), ensure_ascii=False, indent=2))
        elif output_format == "csv":
            print(analysis_to_dataframe(analysis).to_csv(index=False), end="")
        else:
            print_summary(analysis, config["top"])

        if config["output"]:
            path = save_analysis(analysis, str(config["output"]))
            print(f"💾 Results saved to {path}", file=status)

        print("\n✅ Analysis completed successfully!", file=status)

    except KeyboardInterrupt:
        print("\n❌ Interrupted by user")
        sys.exit(1)
    except (
        InvalidArgumentError,
        RangeError,
        RuntimeError,
        OSError,
        UnicodeDecodeError,
    ) as e:
        print(f"❌ Error running analysis: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Unexpected error: {e}")
        print("Please report this issue with the full error message.")
        sys.exit(1)


if __name__ == "__main__":
    main()
