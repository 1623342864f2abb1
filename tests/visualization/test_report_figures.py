from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from payments_pipeline.pipeline import run_payments_pipeline
from payments_pipeline.visualization.report_figures import (
    NEUTRAL_FILL,
    plot_avg_per_recipient_trend,
    plot_national_total_trend,
    plot_per_recipient_choropleth,
    plot_top_total_bar,
    save_report_figures,
)


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


def _summary() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "year": pd.array([2022, 2023, 2024], dtype="Int64"),
            "total_amount_sum": [1.5e6, 2.5e6, 3.0e6],
            "recipient_count_sum": pd.array([100.0, 0.0, 150.0], dtype="Float64"),
            "national_per_recipient_metric": pd.array([15000.0, pd.NA, 20000.0], dtype="Float64"),
        }
    )


def test_plot_national_total_trend_in_millions() -> None:
    fig, ax = plot_national_total_trend(_summary())

    line = ax.get_lines()[0]
    assert list(line.get_ydata()) == [1.5, 2.5, 3.0]
    assert "2022–2024" in ax.get_title()


def test_plot_avg_trend_leaves_gap_for_undefined_year() -> None:
    fig, ax = plot_avg_per_recipient_trend(_summary())

    ydata = ax.get_lines()[0].get_ydata()
    assert ydata[0] == 15000.0
    assert pd.isna(ydata[1])


def test_plot_top_total_bar_largest_on_top() -> None:
    top = pd.DataFrame({"region_name": ["Texas", "Ohio"], "total_amount": [4e6, 2e6]})

    fig, ax = plot_top_total_bar(top, 2024)
    fig.canvas.draw()

    labels = [tick.get_text() for tick in ax.get_yticklabels()]
    assert labels == ["Ohio", "Texas"]
    assert ax.get_title().endswith("(2024)")


def test_plot_choropleth_neutral_fill_for_undefined() -> None:
    geo = pd.DataFrame(
        {
            "long": [0.0, 1.0, 1.0, 2.0, 3.0, 3.0],
            "lat": [0.0, 0.0, 1.0, 0.0, 0.0, 1.0],
            "group": [1, 1, 1, 2, 2, 2],
            "order": [1, 2, 3, 4, 5, 6],
            "per_recipient_metric": pd.array([10.0, 10.0, 10.0, pd.NA, pd.NA, pd.NA], dtype="Float64"),
        }
    )

    fig, ax = plot_per_recipient_choropleth(geo, 2024)

    facecolors = [patch.get_facecolor() for patch in ax.patches]
    assert len(facecolors) == 2
    assert facecolors[1] == pytest.approx(matplotlib.colors.to_rgba(NEUTRAL_FILL))


def test_plots_handle_empty_tables() -> None:
    empty = pd.DataFrame(columns=["year", "total_amount_sum", "national_per_recipient_metric"])

    fig, ax = plot_national_total_trend(empty)

    assert ax.texts[0].get_text() == "No data available"


def test_plot_missing_columns() -> None:
    with pytest.raises(ValueError, match="Missing required columns"):
        plot_top_total_bar(pd.DataFrame({"region_name": ["Ohio"]}))


def test_save_report_figures_skips_absent_tables(tmp_path: Path, two_year_sources) -> None:
    result = run_payments_pipeline(two_year_sources)

    written = save_report_figures(result, tmp_path)

    assert set(written) == {
        "national_total_payment_trend",
        "avg_payment_per_physician_trend",
        "top10_states_2024",
    }
    assert all(path.exists() for path in written.values())
