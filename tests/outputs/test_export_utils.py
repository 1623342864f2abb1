from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from openpyxl import load_workbook

from payments_pipeline.outputs.export_utils import (
    _dedupe_sheet_names,
    write_multi_sheet_excel,
    write_report_tables,
    write_table_csv,
)
from payments_pipeline.pipeline import run_payments_pipeline


def test_write_table_csv_creates_parent_and_keeps_missing_empty(tmp_path: Path) -> None:
    df = pd.DataFrame(
        {
            "year": pd.array([2024], dtype="Int64"),
            "national_per_recipient_metric": pd.array([pd.NA], dtype="Float64"),
        }
    )

    path = write_table_csv(df, tmp_path / "nested" / "national_summary.csv")

    assert path.exists() is True
    assert path.read_text().splitlines() == ["year,national_per_recipient_metric", "2024,"]


def test_dedupe_sheet_names_truncates_and_suffixes() -> None:
    names = _dedupe_sheet_names(["x" * 40, "x" * 35, "short"])

    assert names[0] == "x" * 31
    assert names[1] == "x" * 29 + "_1"
    assert names[2] == "short"


def test_write_multi_sheet_excel(tmp_path: Path) -> None:
    sheets = {
        "national_summary": pd.DataFrame({"year": [2023]}),
        "top_states_per_year": pd.DataFrame({"year": [2023], "region_name": ["Ohio"]}),
    }

    path = write_multi_sheet_excel(sheets, tmp_path / "out.xlsx")

    workbook = load_workbook(path)
    assert workbook.sheetnames == ["national_summary", "top_states_per_year"]


def test_write_report_tables(tmp_path: Path, two_year_sources) -> None:
    result = run_payments_pipeline(two_year_sources)

    written = write_report_tables(result, tmp_path)

    assert set(written) == {
        "national_summary",
        "top_states_per_year",
        "top10_states_2024",
        "workbook",
    }
    for path in written.values():
        assert path.exists() is True

    summary = pd.read_csv(written["national_summary"])
    assert summary["year"].tolist() == [2023, 2024]
    assert summary["national_per_recipient_metric"].tolist() == [
        pytest.approx(15.0),
        pytest.approx(10.0),
    ]
