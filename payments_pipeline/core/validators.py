# Docstring for payments_pipeline/core/validators module
"""
validators.py

Shared validation helpers for canonical data checks across the loader and
engines.

This module centralizes schema checks (required columns) and row-level data
quality checks (amounts, recipient counts, duplicate region/year pairs). Row
checks only flag problems; they never drop rows, because downstream totals must
see every row the extracts contain.

Public API
----------
- validate_required_columns(df, required_cols, source_name) -> None
- validate_amounts_series(series) -> pd.Series
- validate_counts_series(series) -> pd.Series
- duplicate_region_mask(df) -> pd.Series
- build_validation_issues(amount_valid, count_valid, duplicate_mask) -> pd.Series

Internal helpers
----------------
Underscore-prefixed helpers are intentionally not part of the public API.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from ..errors import SchemaError


def validate_required_columns(
    df: pd.DataFrame,
    required_cols: Iterable[str],
    source_name: str,
) -> None:
    """
    Ensure that the DataFrame has at least the required columns.

    Raises:
        SchemaError: if any required column is missing.
    """
    # Keeps the caller's column order so the message lists columns as configured
    missing = [col for col in required_cols if col not in df.columns]
    if missing:
        raise SchemaError(
            f"{source_name}: missing required columns: {missing}. "
            f"Present columns: {list(df.columns)}"
        )


def validate_amounts_series(series: pd.Series) -> pd.Series:
    """Amounts must be present, finite and non-negative."""
    # Text like "abc" becomes NaN here and is reported as invalid below
    amounts = pd.to_numeric(series, errors="coerce").astype("float64")
    # NaN compares False on both sides, so missing amounts fail every check
    valid = amounts.notna() & (amounts >= 0) & (amounts != float("inf"))
    return valid.astype("boolean")     # -> nullable boolean, same as the other flags


def validate_counts_series(series: pd.Series) -> pd.Series:
    """Recipient counts may be missing; when present they must be whole and positive."""
    counts = pd.to_numeric(series, errors="coerce").astype("float64")
    present = counts.notna()
    # '~present |' lets missing counts pass; they only make the metric undefined
    # round() == value catches fractional counts like 12.5
    valid = ~present | ((counts > 0) & (counts.round() == counts))
    return valid.astype("boolean")


def duplicate_region_mask(df: pd.DataFrame) -> pd.Series:
    """True for every row whose (year, region_name) pair occurs more than once."""
    if df.empty:
        return pd.Series(False, index=df.index, dtype="boolean")
    keys = df[["year", "region_name"]]
    # keep=False marks every member of a duplicate set, not just the later ones
    return keys.duplicated(keep=False).astype("boolean")


def build_validation_issues(
    amount_valid: pd.Series,
    count_valid: pd.Series,
    duplicate_mask: pd.Series,
) -> pd.Series:
    """Build per-row validation issue lists from boolean flags."""
    # Flags are read by position so repeated index labels still map to one row each
    invalid_amount = amount_valid.eq(False).fillna(False).to_numpy(dtype=bool)
    invalid_count = count_valid.eq(False).fillna(False).to_numpy(dtype=bool)
    duplicated = duplicate_mask.eq(True).fillna(False).to_numpy(dtype=bool)

    rows: list[list[str]] = []
    for amount_bad, count_bad, is_duplicate in zip(invalid_amount, invalid_count, duplicated):
        row_issues = []                 # -> one fresh list per row, never shared
        if amount_bad:
            row_issues.append("amount_invalid")
        if count_bad:
            row_issues.append("recipient_count_invalid")
        if is_duplicate:
            row_issues.append("duplicate_region_year")
        rows.append(row_issues)

    return pd.Series(rows, index=amount_valid.index, dtype=object)
