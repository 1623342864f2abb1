# Docstring for payments_pipeline/engines/geo_enrich module
"""
geo_enrich.py

Geo enricher: attaches one year's per-recipient metric to a polygon reference
for choropleth rendering.

The polygon reference is a vertex table in the layout of R's
`maps::map_data("state")`: one row per vertex with long, lat, group, order and
region (lowercased state name). The join is a left outer join from the
reference, so every polygon vertex survives. Polygons without a matching state
carry <NA> in per_recipient_metric, which renderers draw as a neutral fill;
the metric is never filled with 0.

When no usable reference is available the enricher raises CapabilityUnavailable. The
orchestrator treats that as a soft degradation and skips the GeoJoined table.

Public API
----------
- load_geo_reference(path) -> pd.DataFrame
- join_geo_reference(derived_df, reference, year=None, key_column="region")
    -> pd.DataFrame
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

import pandas as pd

from ..config import GEO_CONFIG, GEO_REFERENCE_COLUMNS
from ..core.normalizers import normalize_text_series, region_key_series
from ..core.validators import validate_required_columns
from ..errors import CapabilityUnavailable, SchemaError

logger = logging.getLogger(__name__)

JOINED_VALUE_COLUMNS = [
    "year",
    "region_name",
    "total_amount",
    "recipient_count",
    "per_recipient_metric",
]


def _check_reference_columns(reference: pd.DataFrame, required: list[str], source_name: str) -> None:
    # A reference without polygon columns cannot be drawn; the geo output is skipped
    try:
        validate_required_columns(reference, required, source_name=source_name)
    except SchemaError as exc:
        raise CapabilityUnavailable(str(exc)) from exc


def load_geo_reference(path: Path | str | None = GEO_CONFIG.reference_path) -> pd.DataFrame:
    """
    Read a polygon vertex table from CSV.

    Raises:
        CapabilityUnavailable: if no path is configured, or the file is
            missing, unreadable or lacks a polygon column.
    """
    if path is None:
        raise CapabilityUnavailable("No geo reference configured; choropleth join skipped.")

    path = Path(path)
    if not path.exists():
        raise CapabilityUnavailable(f"Geo reference not found at: {path}")

    try:
        reference = pd.read_csv(path)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise CapabilityUnavailable(f"Geo reference at {path} is unreadable: {exc}") from exc

    _check_reference_columns(reference, GEO_REFERENCE_COLUMNS, f"Geo reference ({path.name})")
    return reference


def join_geo_reference(
    derived_df: pd.DataFrame,
    reference: pd.DataFrame | None,
    *,
    year: int | None = None,
    key_column: str = GEO_CONFIG.key_column,
) -> pd.DataFrame:
    """
    Left-join derived rows onto the polygon reference by lowercased region name.

    Args:
        derived_df:
            Derived Regional Records. When `year` is given only that year's
            rows are joined; otherwise the frame is expected to hold one year.
        reference:
            Polygon vertex table, or None when the reference is unavailable.
        year:
            Program year to join.
        key_column:
            Reference column holding the lowercased region name.

    Returns:
        One row per reference row, in reference order, with the reference
        columns followed by JOINED_VALUE_COLUMNS.

    Raises:
        CapabilityUnavailable: if reference is None or lacks a polygon column.
        SchemaError: if derived_df lacks a value column.
    """

    if reference is None:
        raise CapabilityUnavailable("No geo reference supplied; choropleth join skipped.")

    ref_required = [c for c in GEO_REFERENCE_COLUMNS if c != "region"] + [key_column]
    _check_reference_columns(reference, ref_required, "Geo reference")
    validate_required_columns(derived_df, JOINED_VALUE_COLUMNS, source_name="Geo enricher")

    rows = derived_df
    if year is not None:
        rows = derived_df[derived_df["year"].eq(int(year)).fillna(False).astype(bool)]
        if rows.empty:
            logger.warning("No rows for year %s; every polygon will carry an undefined metric.", year)

    values = rows[JOINED_VALUE_COLUMNS].copy()
    values["_region_key"] = region_key_series(values["region_name"])
    values = values[values["_region_key"].notna()]

    duplicated = values["_region_key"].duplicated(keep="first")
    if duplicated.any():
        warnings.warn(
            f"Geo enricher: {int(duplicated.sum())} duplicate region rows ignored; "
            "first occurrence joined.",
            stacklevel=2,
        )
        values = values[~duplicated]

    polygons = reference.copy()
    polygons["_region_key"] = normalize_text_series(polygons[key_column], strip=True, lower=True)

    joined = polygons.merge(
        values,
        on="_region_key",
        how="left",
        sort=False,
        validate="many_to_one",
    )
    joined["per_recipient_metric"] = joined["per_recipient_metric"].astype("Float64")
    joined = joined.drop(columns=["_region_key"])

    matched = int(joined["region_name"].notna().sum())
    logger.info("Geo join matched %d of %d polygon vertices", matched, len(joined))
    return joined
