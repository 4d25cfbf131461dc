# app/services/csv_import.py
"""
CSV reading for the import pipeline.

Turns raw upload bytes into a list of header-keyed row dicts:
- the first line is the header row
- every value is kept as the raw string (no type inference, no NA guessing)
- blank lines are skipped
- a field missing from a short row is left out of that row's dict
"""

import io
from typing import Dict, List

import pandas as pd


class CsvParseError(Exception):
    """Raised when the uploaded file cannot be read as CSV."""


def _decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        try:
            # utf-8-sig strips a leading BOM if there is one
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CsvParseError(f"File is not valid UTF-8 text ({e.reason})") from e
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw


def read_csv_rows(content: str | bytes) -> List[Dict[str, str]]:
    """
    Parse CSV content into row dicts keyed by the (trimmed) header names.

    Returns [] for an empty file or a file with only a header row.
    Raises CsvParseError on malformed input.
    """
    text = _decode(content)
    if not text.strip():
        return []

    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
        )
    except pd.errors.EmptyDataError:
        return []
    except (pd.errors.ParserError, ValueError) as e:
        raise CsvParseError(str(e).strip()) from e

    # normalize headers
    df.columns = [str(c).strip() for c in df.columns]

    rows: List[Dict[str, str]] = []
    for record in df.to_dict(orient="records"):
        rows.append({key: value for key, value in record.items() if not pd.isna(value)})
    return rows
