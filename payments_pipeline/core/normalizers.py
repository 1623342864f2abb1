# Docstring for payments_pipeline/core/normalizers module
"""
normalizers.py

Shared normalization helpers that coerce yearly extracts into the canonical
row schema.

Design goals
------------
- Single source of truth for year, amount, recipient-count, and region-name
  handling.
- Preserve canonical dtypes: pandas string for text, pandas nullable Int64 for
  years, and nullable Float64 for recipient counts so missing values stay <NA>.
- Never turn a missing or zero denominator into a number.

Public API
----------
- normalize_text_series(series, strip=True, lower=False) -> pd.Series
- normalize_region_name_series(series) -> pd.Series
- region_key_series(series) -> pd.Series
- to_numeric_series(series) -> pd.Series
- to_int64_nullable_series(series) -> pd.Series
- coerce_year_series(series) -> pd.Series
- normalize_recipient_count_series(series) -> pd.Series
"""

from __future__ import annotations

import pandas as pd


def normalize_text_series(
    series: pd.Series,
    *,                          # strip and lower are keyword-only: func(series, strip=True, lower=True)
    strip: bool = True,
    lower: bool = False,
) -> pd.Series:
    """Normalize text to pandas string dtype with optional strip/lower."""
    s = series.astype("string") # -> pandas string dtype, missing values become <NA>
    if strip:
        s = s.str.strip()       # '.str' applies to the whole Series
    if lower:
        s = s.str.lower()
    return s


def normalize_region_name_series(series: pd.Series) -> pd.Series:
    """
    Region names: strip and collapse inner whitespace, keep the original case.

    Blank names become <NA>.

    Examples:
        '  New   York ' -> 'New York'
        ''              -> <NA>
    """
    s = normalize_text_series(series, strip=True)
    s = s.str.replace(r"\s+", " ", regex=True)  # runs of spaces/tabs -> single space
    return s.replace("", pd.NA)                 # blank after strip -> missing


def region_key_series(series: pd.Series) -> pd.Series:
    """Lowercased region name used as the join key against polygon references."""
    # Polygon references store names lowercased ("new york"), so match on that form
    return normalize_region_name_series(series).str.lower()


def _strip_number_text(series: pd.Series) -> pd.Series:
    """Text exports: drop thousands separators, currency signs and padding.

    Returns an object Series with None for missing values so pd.to_numeric
    yields plain float64 NaN instead of a masked array.
    """
    # Numeric columns (int/float) need no cleanup
    if not (series.dtype == object or pd.api.types.is_string_dtype(series.dtype)):
        return series
    # "$1,234.50 " -> "1234.50"
    cleaned = series.astype("string").str.replace(r"[,$\s]", "", regex=True)
    return pd.Series(
        cleaned.to_numpy(dtype=object, na_value=None),
        index=series.index,
        dtype=object,
    )


def to_numeric_series(series: pd.Series) -> pd.Series:
    """Coerce values to numeric, returning floats with NaN for invalid entries."""
    # errors="coerce": values that fail to parse (e.g., "abc") become NaN
    # astype("float64") keeps integer columns on the same dtype as float ones
    return pd.to_numeric(_strip_number_text(series), errors="coerce").astype("float64")


def to_int64_nullable_series(series: pd.Series) -> pd.Series:
    """Coerce to pandas nullable integer (Int64) with NA preservation.

    Non-integral numbers (e.g. 2023.5) become <NA> instead of raising on cast.
    """
    numeric = to_numeric_series(series)
    # where() keeps values where the condition holds, NaN elsewhere
    numeric = numeric.where(numeric.round() == numeric)
    return numeric.astype("Int64")      # NaN -> <NA>, 2023.0 -> 2023


def coerce_year_series(series: pd.Series) -> pd.Series:
    """Program year as Int64 whatever the source representation ("2023", 2023.0, 2023)."""
    return to_int64_nullable_series(series)


def normalize_recipient_count_series(series: pd.Series) -> pd.Series:
    """
    Recipient counts as nullable Float64 with zero treated as missing.

    A count of exactly zero forbids division the same way a missing count
    does, so both are stored as <NA>.
    """
    counts = to_numeric_series(series)
    counts = counts.where(counts != 0)  # 0 -> NaN; NaN stays NaN
    return counts.astype("Float64")     # NaN -> <NA> in the nullable float dtype
