# Docstring for payments_pipeline/engines/rankings module
"""
rankings.py

Ranker: top-K tables over the derived corpus.

Two independent operations:
  - top_per_recipient_by_year: per program year, the K rows with the highest
    per_recipient_metric. Rows with an undefined metric are not eligible.
    Years are emitted in ascending order.
  - top_by_total_for_year: for one selected year, the K rows with the highest
    total_amount. Rows with an undefined metric stay eligible here.

Both sort descending with a stable sort (mergesort), so ties keep the order
the rows had in the corpus. A year with fewer than K eligible rows simply
yields fewer rows. Inputs are never mutated.

Every output carries a 1-based `rank` column within its year.

Public API
----------
- top_per_recipient_by_year(df, k=5) -> pd.DataFrame
- top_by_total_for_year(df, year, k=10) -> pd.DataFrame
"""

from __future__ import annotations

import pandas as pd

from ..config import RANKING_CONFIG
from ..core.validators import validate_required_columns
from ..errors import SelectionError


def _validate_k(k: int) -> int:
    k = int(k)
    if k < 1:
        raise ValueError(f"k must be a positive integer; got {k}.")
    return k


def _stable_top_k(df: pd.DataFrame, key: str, k: int) -> pd.DataFrame:
    ordered = df.sort_values(key, ascending=False, kind="mergesort")
    top = ordered.head(k).copy()
    top["rank"] = range(1, len(top) + 1)
    return top


def top_per_recipient_by_year(
    df: pd.DataFrame,
    k: int = RANKING_CONFIG.per_recipient_top_k,
) -> pd.DataFrame:
    """
    Per-year top-K rows by per_recipient_metric, years ascending.

    Required columns:
      - year
      - per_recipient_metric
    """

    validate_required_columns(df, ["year", "per_recipient_metric"], source_name="Per-recipient ranking")
    k = _validate_k(k)

    eligible = df[df["per_recipient_metric"].notna() & df["year"].notna()]
    columns = list(df.columns) + ["rank"]
    if eligible.empty:
        # Zero rows, but the corpus dtypes survive
        empty = df.iloc[0:0].copy()
        empty["rank"] = pd.Series(index=empty.index, dtype="int64")
        return empty[columns]

    per_year = [
        _stable_top_k(group, "per_recipient_metric", k)
        for _, group in eligible.groupby("year", sort=True)
    ]
    result = pd.concat(per_year, ignore_index=True)
    result["rank"] = result["rank"].astype("int64")
    return result[columns]


def top_by_total_for_year(
    df: pd.DataFrame,
    year: int,
    k: int = RANKING_CONFIG.total_top_k,
) -> pd.DataFrame:
    """
    Top-K rows of one program year by total_amount.

    Required columns:
      - year
      - total_amount

    Raises:
        SelectionError: if `year` is not present in the corpus.
    """

    validate_required_columns(df, ["year", "total_amount"], source_name="Total ranking")
    k = _validate_k(k)

    year_mask = df["year"].eq(int(year)).fillna(False).astype(bool)
    selected = df[year_mask]
    if selected.empty:
        available = sorted(int(value) for value in df["year"].dropna().unique())
        raise SelectionError(int(year), available)

    result = _stable_top_k(selected, "total_amount", k).reset_index(drop=True)
    result["rank"] = result["rank"].astype("int64")
    return result
