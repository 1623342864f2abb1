# Docstring for payments_pipeline/engines/national_summary module
"""
national_summary.py

National aggregator: reduces the derived corpus to one summary row per program
year.

For each year:
  - total_amount_sum: sum of total_amount over every row, including rows whose
    per-recipient metric is undefined
  - recipient_count_sum: sum of the defined recipient counts (missing counts are
    skipped, not counted as zero)
  - national_per_recipient_metric: total_amount_sum / recipient_count_sum,
    <NA> when recipient_count_sum is 0

The national metric is the ratio of the sums, i.e. the recipient-weighted
average. Averaging the per-region metrics gives a different number and is not
what this module reports.

Public API
----------
- build_national_summary(df) -> pd.DataFrame
"""

from __future__ import annotations

import logging

import pandas as pd

from ..config import NATIONAL_SUMMARY_COLUMNS
from ..core.validators import validate_required_columns
from ..errors import AggregationError

logger = logging.getLogger(__name__)


def build_national_summary(df: pd.DataFrame) -> pd.DataFrame:
    """
    Aggregate Regional Records by year, ascending.

    Required columns:
      - year
      - total_amount
      - recipient_count

    Raises:
        AggregationError: if the corpus has no rows with a program year.
    """

    validate_required_columns(
        df, ["year", "total_amount", "recipient_count"], source_name="National aggregator"
    )

    working = df[["year", "total_amount", "recipient_count"]].copy()
    working = working[working["year"].notna()]
    if working.empty:
        raise AggregationError("Cannot build national summary: corpus has no program years.")

    working["total_amount"] = pd.to_numeric(working["total_amount"], errors="coerce").astype("float64")
    working["recipient_count"] = pd.to_numeric(
        working["recipient_count"], errors="coerce"
    ).astype("Float64")

    summary = (
        working.groupby("year", sort=True)
        .agg(
            total_amount_sum=("total_amount", "sum"),
            recipient_count_sum=("recipient_count", "sum"),
        )
        .reset_index()
    )
    summary["year"] = summary["year"].astype("Int64")
    summary["recipient_count_sum"] = summary["recipient_count_sum"].astype("Float64")

    denominator = summary["recipient_count_sum"].where(summary["recipient_count_sum"] != 0)
    summary["national_per_recipient_metric"] = (
        summary["total_amount_sum"].astype("Float64") / denominator
    ).astype("Float64")

    undefined_years = summary.loc[
        summary["national_per_recipient_metric"].isna(), "year"
    ].tolist()
    if undefined_years:
        logger.warning(
            "No recipient counts for years %s; national per-recipient metric left undefined.",
            undefined_years,
        )

    logger.info("Built national summary for %d years", len(summary))
    return summary[NATIONAL_SUMMARY_COLUMNS]
