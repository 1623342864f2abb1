# Docstring for payments_pipeline/load_data module
"""
load_data.py

Input loader utilities for yearly Open Payments state extracts.

This module reads each yearly extract into a pandas DataFrame and coerces it
into the canonical row schema (see `config.CANONICAL_COLUMNS`), tagging every
row with the program year the source was supplied for.

Design goals
------------
- Separation of concerns: the loader never decides which files exist. It
  receives ordered (year, source) pairs from a provider such as
  `discover_yearly_sources`, or from tests with in-memory DataFrames.
- Repeatability: the same sources always load to the same frames in the same
  order, also when loading runs on a thread pool.
- Fail fast on schema: a source missing a required column raises SchemaError
  and aborts the run, because every later stage assumes one schema.

Inputs
------
- CSV (.csv) or Excel (.xlsx/.xls) extracts with the published headers
  (Program_Year, State_Name, Total_Payment_Amount_Physician,
  Total_Number_of_Physicians), or DataFrames already using canonical names.

Public API
----------
- load_year_source(source, year, column_map=None, sheet_name=0) -> pd.DataFrame
- load_yearly_sources(sources, max_workers=None) -> list[pd.DataFrame]
- discover_yearly_sources(data_dir=RAW_DATA_DIR, pattern=SOURCE_FILE_PATTERN)
    -> list[tuple[int, Path]]
"""

from __future__ import annotations

import logging
import re
import warnings
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from .config import (
    CANONICAL_COLUMNS,
    PAYMENTS_COLUMN_MAP,
    RAW_DATA_DIR,
    REQUIRED_COLUMNS,
    SOURCE_FILE_PATTERN,
)
from .core.normalizers import (
    coerce_year_series,
    normalize_recipient_count_series,
    normalize_region_name_series,
    to_numeric_series,
)
from .core.validators import (
    build_validation_issues,
    duplicate_region_mask,
    validate_amounts_series,
    validate_counts_series,
    validate_required_columns,
)

logger = logging.getLogger(__name__)

Source = Union[str, Path, pd.DataFrame]

EXCEL_SUFFIXES = {".xlsx", ".xls"}


def _read_source(source: Source, sheet_name: int | str = 0) -> tuple[pd.DataFrame, str]:
    """Return the raw table and a label for messages."""
    if isinstance(source, pd.DataFrame):
        return source.copy(), "in-memory frame"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Payments extract not found at: {path}")

    if path.suffix.lower() in EXCEL_SUFFIXES:
        df = pd.read_excel(path, sheet_name=sheet_name)
    else:
        df = pd.read_csv(path)
    return df, path.name


def _warn_on_issues(issues: pd.Series, label: str) -> None:
    counts: dict[str, int] = {}
    for row_issues in issues:
        for issue in row_issues:
            counts[issue] = counts.get(issue, 0) + 1
    for issue, count in counts.items():
        warnings.warn(f"{label}: {count} rows flagged {issue}.", stacklevel=3)


def _tag_year(raw_years: pd.Series | None, year: int, index: pd.Index, label: str) -> pd.Series:
    source_year = pd.Series(year, index=index, dtype="Int64")
    if raw_years is None:
        return source_year

    file_years = coerce_year_series(raw_years)
    mismatch = file_years.notna() & file_years.ne(year)
    mismatch_count = int(mismatch.fillna(False).sum())
    if mismatch_count:
        warnings.warn(
            f"{label}: {mismatch_count} rows carry a program year other than "
            f"{year}; using the source year.",
            stacklevel=3,
        )
    return source_year


def load_year_source(
    source: Source,
    year: int,
    *,
    column_map: dict[str, str] | None = None,
    sheet_name: int | str = 0,
) -> pd.DataFrame:
    """
    Load one yearly extract and coerce it into canonical Regional Records.

    Args:
        source:
            Path to a .csv/.xlsx extract, or a DataFrame.
        year:
            Program year the source was supplied for; every row is tagged
            with it.
        column_map:
            Raw header -> canonical name mapping. Defaults to
            PAYMENTS_COLUMN_MAP. Canonical headers pass through unchanged.
        sheet_name:
            Sheet name or index for Excel sources.

    Returns:
        DataFrame with CANONICAL_COLUMNS (year, region_name, total_amount,
        recipient_count), in source row order.

    Raises:
        SchemaError: if region_name, total_amount or recipient_count is absent.
        FileNotFoundError: if a path source does not exist.
    """
    year = int(year)
    raw_df, label = _read_source(source, sheet_name=sheet_name)
    # In-memory frames may carry repeated index labels (e.g. concat without ignore_index)
    raw_df = raw_df.reset_index(drop=True)
    label = f"Payments {year} ({label})"

    df = raw_df.rename(columns=column_map or PAYMENTS_COLUMN_MAP)
    validate_required_columns(df, REQUIRED_COLUMNS, source_name=label)

    out = pd.DataFrame(index=df.index)
    out["year"] = _tag_year(df.get("year"), year, df.index, label)
    out["region_name"] = normalize_region_name_series(df["region_name"])
    out["total_amount"] = to_numeric_series(df["total_amount"])
    out["recipient_count"] = normalize_recipient_count_series(df["recipient_count"])

    issues = build_validation_issues(
        validate_amounts_series(out["total_amount"]),
        validate_counts_series(out["recipient_count"]),
        duplicate_region_mask(out),
    )
    _warn_on_issues(issues, label)

    logger.info("Loaded %d rows for program year %d from %s", len(out), year, label)
    return out[CANONICAL_COLUMNS]


def load_yearly_sources(
    sources: Iterable[tuple[int, Source]],
    *,
    max_workers: int | None = None,
) -> list[pd.DataFrame]:
    """
    Load every (year, source) pair and return the frames in input order.

    The number of sources is not checked against any expected year range.
    With max_workers > 1 sources load on a thread pool; ordering of the
    returned list still follows the input so stable tie-breaks downstream are
    reproducible.
    """
    pairs = [(int(year), source) for year, source in sources]
    if max_workers is None or max_workers <= 1 or len(pairs) <= 1:
        return [load_year_source(source, year) for year, source in pairs]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        # executor.map yields results in submission order
        return list(executor.map(lambda pair: load_year_source(pair[1], pair[0]), pairs))


def discover_yearly_sources(
    data_dir: Path | str = RAW_DATA_DIR,
    pattern: str = SOURCE_FILE_PATTERN,
) -> list[tuple[int, Path]]:
    """
    Provider of (year, path) pairs for files named like payments_2024.csv.

    Returns pairs sorted by year. The year comes from the first capture
    group of `pattern`.
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise FileNotFoundError(f"Payments data directory not found at: {data_dir}")

    regex = re.compile(pattern)
    found: list[tuple[int, Path]] = []
    for path in sorted(data_dir.iterdir()):
        match = regex.match(path.name)
        if match and path.is_file():
            found.append((int(match.group(1)), path))

    found.sort(key=lambda pair: pair[0])
    logger.info("Discovered %d yearly extracts in %s", len(found), data_dir)
    return found
