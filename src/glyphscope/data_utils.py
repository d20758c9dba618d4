"""
Data loading and export utilities.

This module provides functions for reading input documents and turning
analysis results into pandas DataFrames, JSON, or CSV files.
"""

import json
import os
from typing import Dict, List, Sequence

import pandas as pd

from .errors import RangeError
from .metrics import TextAnalysis

DEFAULT_ENCODING = "utf-8"
JSON_EXTENSION = ".json"
CSV_EXTENSION = ".csv"
DATAFRAME_COLUMNS = ["label", "count", "ratio", "distinct", "chars"]


def load_text_files(
    paths: Sequence[str], encoding: str = DEFAULT_ENCODING
) -> Dict[str, str]:
    """Read each file into a string, keyed by path in the given order."""
    documents: Dict[str, str] = {}
    for path in paths:
        with open(path, "r", encoding=encoding) as f:
            documents[path] = f.read()
    return documents


def analysis_to_dataframe(analysis: TextAnalysis) -> pd.DataFrame:
    """Convert a breakdown to one row per label, largest buckets first."""
    rows: List[Dict[str, object]] = [
        {
            "label": label,
            "count": bucket.count,
            "ratio": bucket.ratio,
            "distinct": len(bucket.chars),
            "chars": "".join(bucket.chars),
        }
        for label, bucket in analysis.breakdown.items()
    ]

    df = pd.DataFrame(rows, columns=DATAFRAME_COLUMNS)
    if df.empty:
        return df
    return df.sort_values(
        by=["count", "label"], ascending=[False, True], ignore_index=True
    )


def save_analysis(analysis: TextAnalysis, path: str) -> str:
    """Write an analysis as JSON or CSV depending on the file extension."""
    extension = os.path.splitext(path)[1].lower()
    if extension not in (JSON_EXTENSION, CSV_EXTENSION):
        raise RangeError(
            f"Unsupported output format '{extension}' "
            f"(use {JSON_EXTENSION} or {CSV_EXTENSION})"
        )

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    if extension == JSON_EXTENSION:
        with open(path, "w", encoding=DEFAULT_ENCODING) as f:
            json.dump(analysis.to_dict(), f, ensure_ascii=False, indent=2)
    else:
        analysis_to_dataframe(analysis).to_csv(path, index=False)
    return path
