# Docstring for payments_pipeline/engines/metrics module
"""
metrics.py

Metric deriver: adds the per-recipient payment metric to every Regional Record.

    per_recipient_metric = total_amount / recipient_count

The metric is <NA> when recipient_count is missing or zero. It is never
stored as inf or 0. Rows with an undefined metric stay in the frame so
total-based aggregation and ranking still see them; only the per-recipient
ranking drops them.

The derivation is row-wise and independent of grouping (the map step that the
national aggregator's grouped reduce consumes).

Public API
----------
- derive_per_recipient_metric(df) -> pd.DataFrame
"""

from __future__ import annotations

import pandas as pd

from ..core.validators import validate_required_columns


def derive_per_recipient_metric(df: pd.DataFrame) -> pd.DataFrame:
    """
    Return a copy of df with a nullable Float64 per_recipient_metric column.

    Required columns:
      - total_amount
      - recipient_count
    """

    validate_required_columns(df, ["total_amount", "recipient_count"], source_name="Metric deriver")

    out = df.copy()
    amounts = pd.to_numeric(out["total_amount"], errors="coerce").astype("Float64")
    counts = pd.to_numeric(out["recipient_count"], errors="coerce").astype("Float64")

    has_denominator = (counts.notna() & counts.ne(0)).fillna(False).astype(bool)
    out["per_recipient_metric"] = (amounts / counts.where(has_denominator)).astype("Float64")

    return out
