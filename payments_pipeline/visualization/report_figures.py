"""
report_figures.py

Figures for the Open Payments state summary, drawn from the pipeline's result
tables:
  - national total payment trend (millions USD)
  - national average payment per physician trend
  - top states by total payment for the selected year (horizontal bars)
  - payment per physician choropleth for the selected year
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Tuple

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib import colormaps
from matplotlib.colors import Normalize

from ..config import REPORTS_FIGURES_DIR

if TYPE_CHECKING:
    from ..pipeline import PipelineResult


NEUTRAL_FILL = "#E5E5E5"


def _validate_required_columns(df: pd.DataFrame, required_cols: list[str]) -> None:
    missing = [col for col in required_cols if col not in df.columns]
    if missing:
        missing_list = ", ".join(missing)
        raise ValueError(f"Missing required columns: {missing_list}")


def _empty_axes(ax: plt.Axes) -> None:
    ax.text(0.5, 0.5, "No data available", ha="center", va="center")
    ax.set_axis_off()


def _year_span(years: pd.Series) -> str:
    return f"{int(years.min())}–{int(years.max())}"


def plot_national_total_trend(
    summary_df: pd.DataFrame,
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot national total payment per program year, in millions of USD.
    """

    _validate_required_columns(summary_df, ["year", "total_amount_sum"])

    fig, ax = plt.subplots(figsize=(8, 4))
    if summary_df.empty:
        _empty_axes(ax)
        return fig, ax

    data = summary_df.sort_values("year")
    years = data["year"].astype(int)
    totals = data["total_amount_sum"].astype(float) / 1e6

    ax.plot(years, totals, marker="o", linewidth=2, color="steelblue")
    ax.set_xlabel("Program Year")
    ax.set_ylabel("Total Payment (Millions USD)")
    ax.set_title(
        f"National Total Marketing Payment to Physicians ({_year_span(years)})"
    )
    ax.set_xticks(list(years))

    return fig, ax


def plot_avg_per_recipient_trend(
    summary_df: pd.DataFrame,
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot the national payment per physician per program year.

    Years with an undefined national metric leave a gap in the line.
    """

    _validate_required_columns(summary_df, ["year", "national_per_recipient_metric"])

    fig, ax = plt.subplots(figsize=(8, 4))
    if summary_df.empty:
        _empty_axes(ax)
        return fig, ax

    data = summary_df.sort_values("year")
    years = data["year"].astype(int)
    metric = data["national_per_recipient_metric"].astype("Float64").to_numpy(
        dtype=float, na_value=float("nan")
    )

    ax.plot(years, metric, marker="o", linewidth=2, color="darkgreen")
    ax.set_xlabel("Program Year")
    ax.set_ylabel("Average Payment per Physician (USD)")
    ax.set_title(f"Average Marketing Payment per Physician ({_year_span(years)})")
    ax.set_xticks(list(years))

    return fig, ax


def plot_top_total_bar(
    top_df: pd.DataFrame,
    year: int | None = None,
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot top states by total payment as horizontal bars, largest on top.
    """

    _validate_required_columns(top_df, ["region_name", "total_amount"])

    fig, ax = plt.subplots(figsize=(8, 5))
    if top_df.empty:
        _empty_axes(ax)
        return fig, ax

    # barh draws bottom-up; reverse so rank 1 ends on top
    data = top_df.iloc[::-1]
    ax.barh(data["region_name"].astype(str), data["total_amount"].astype(float) / 1e6, color="#1f77b4")
    ax.set_xlabel("Total Payment (Millions USD)")
    ax.set_ylabel("State")
    suffix = f" ({year})" if year is not None else ""
    ax.set_title(f"Top {len(top_df)} States by Total Marketing Payment to Physicians{suffix}")

    return fig, ax


def plot_per_recipient_choropleth(
    geo_df: pd.DataFrame,
    year: int | None = None,
    *,
    cmap: str = "plasma",
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Fill each polygon group by per_recipient_metric; <NA> polygons get a
    neutral grey fill.
    """

    _validate_required_columns(
        geo_df, ["long", "lat", "group", "order", "per_recipient_metric"]
    )

    fig, ax = plt.subplots(figsize=(9, 6))
    if geo_df.empty:
        _empty_axes(ax)
        return fig, ax

    metric = geo_df["per_recipient_metric"].astype("Float64")
    defined = metric.dropna()
    norm = Normalize(
        vmin=float(defined.min()) if len(defined) else 0.0,
        vmax=float(defined.max()) if len(defined) else 1.0,
    )
    colormap = colormaps[cmap]

    for _, polygon in geo_df.sort_values(["group", "order"], kind="mergesort").groupby("group", sort=False):
        value = polygon["per_recipient_metric"].iloc[0]
        color = NEUTRAL_FILL if pd.isna(value) else colormap(norm(float(value)))
        ax.fill(polygon["long"], polygon["lat"], facecolor=color, edgecolor="white", linewidth=0.2)

    mappable = plt.cm.ScalarMappable(norm=norm, cmap=colormap)
    fig.colorbar(mappable, ax=ax, label="Payment per Physician (USD)")
    ax.set_aspect(1.3)
    ax.set_axis_off()
    suffix = f" ({year})" if year is not None else ""
    ax.set_title(f"Average Marketing Payment per Physician by State{suffix}")

    return fig, ax


def save_report_figures(
    result: "PipelineResult",
    out_dir: Path | str = REPORTS_FIGURES_DIR,
) -> dict[str, Path]:
    """
    Render every figure the result supports to PNG and return the paths.

    The bar chart needs the selected-year table and the map needs the geo
    join; each is skipped when its table is absent.
    """

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    year = result.selected_year

    figures = {
        "national_total_payment_trend": plot_national_total_trend(result.national_summary)[0],
        "avg_payment_per_physician_trend": plot_avg_per_recipient_trend(result.national_summary)[0],
    }
    if result.top_total_selected is not None:
        figures[result.top_total_name] = plot_top_total_bar(
            result.top_total_selected, year
        )[0]
    if result.geo_joined is not None:
        figures[f"payment_per_physician_map_{year}"] = plot_per_recipient_choropleth(
            result.geo_joined, year
        )[0]

    written: dict[str, Path] = {}
    for name, fig in figures.items():
        path = out_dir / f"{name}.png"
        fig.savefig(path, bbox_inches="tight")
        plt.close(fig)
        written[name] = path
    return written
