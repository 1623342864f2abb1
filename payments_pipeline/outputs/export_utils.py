# Docstring for payments_pipeline/outputs/export_utils module
"""
export_utils.py

Utilities for writing the pipeline's result tables to disk.

Design goals
------------
- Low friction: one entrypoint writes every table a run produced.
- Safe output: ensure parent directories exist before writing files.
- Consistent engine: always use the openpyxl engine for .xlsx output.
- Missing values stay empty cells; undefined metrics are never written as 0.

Public API
----------
- write_table_csv(df, output_path, *, index=False) -> Path
- write_multi_sheet_excel(sheets, output_path, *, index=False) -> Path
- write_report_tables(result, out_dir=REPORTS_DIR, *, excel=True) -> dict[str, Path]
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from ..config import REPORTS_DIR

if TYPE_CHECKING:
    from ..pipeline import PipelineResult


EXCEL_SHEETNAME_LIMIT = 31


def _ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _truncate_sheet_name(name: str) -> str:
    return name[:EXCEL_SHEETNAME_LIMIT] if len(name) > EXCEL_SHEETNAME_LIMIT else name


def _dedupe_sheet_names(names: list[str]) -> list[str]:
    """Ensure sheet names are unique after truncation by appending numeric suffixes."""
    seen: dict[str, int] = {}
    deduped: list[str] = []
    for raw_name in names:
        base = _truncate_sheet_name(raw_name)
        if base not in seen:
            seen[base] = 0
            deduped.append(base)
            continue
        seen[base] += 1
        suffix = f"_{seen[base]}"
        trimmed_base = base[: EXCEL_SHEETNAME_LIMIT - len(suffix)]
        deduped.append(f"{trimmed_base}{suffix}")
    return deduped


def write_table_csv(
    df: pd.DataFrame,
    output_path: Path | str,
    *,
    index: bool = False,
) -> Path:
    """Write one result table to CSV and return the output path."""
    path = Path(output_path)
    _ensure_parent_dir(path)
    df.to_csv(path, index=index)
    return path


def write_multi_sheet_excel(
    sheets: dict[str, pd.DataFrame],
    output_path: Path | str,
    *,
    index: bool = False,
) -> Path:
    """
    Write multiple DataFrames to a single Excel workbook and return the path.

    Each dict key becomes a sheet name (truncated to Excel's 31-character limit).
    """
    path = Path(output_path)
    _ensure_parent_dir(path)
    sheet_names = _dedupe_sheet_names(list(sheets.keys()))
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, sheet_name in zip(sheets.keys(), sheet_names):
            sheets[name].to_excel(writer, sheet_name=sheet_name, index=index)
    return path


def write_report_tables(
    result: "PipelineResult",
    out_dir: Path | str = REPORTS_DIR,
    *,
    excel: bool = True,
) -> dict[str, Path]:
    """
    Write each table of a pipeline run to `<out_dir>/<name>.csv`.

    With excel=True the same tables also go to `<out_dir>/payments_summary.xlsx`,
    one sheet per table. The polygon join is CSV-only; it is too long to be
    useful as a sheet.
    """
    out_dir = Path(out_dir)
    tables = result.tables()

    written: dict[str, Path] = {}
    for name, table in tables.items():
        written[name] = write_table_csv(table, out_dir / f"{name}.csv")

    if excel:
        sheets = {name: table for name, table in tables.items() if not name.startswith("geo_joined")}
        written["workbook"] = write_multi_sheet_excel(sheets, out_dir / "payments_summary.xlsx")

    return written
