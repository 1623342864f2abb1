# Docstring for payments_pipeline/pipeline module
"""
pipeline.py

End-to-end orchestration of the Open Payments state summary.

    (year, source) pairs
        -> load_yearly_sources      (Dataset Loader)
        -> combine_yearly_frames    (Corpus Combiner)
        -> derive_per_recipient_metric
        -> build_national_summary   -> NationalSummary
        -> top_per_recipient_by_year -> TopStatesPerYear
        -> top_by_total_for_year    -> Top10Latest   (selected year)
        -> join_geo_reference       -> GeoJoined     (optional)

SchemaError and AggregationError abort the run. A SelectionError only voids
the Top10Latest table and a CapabilityUnavailable only voids GeoJoined; both
are logged, surfaced as warnings, and stored on the result.

Run from the command line:

    python -m payments_pipeline.pipeline --data-dir data/raw --out-dir report
"""

from __future__ import annotations

import argparse
import logging
import warnings
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable

import pandas as pd

from .config import (
    PIPELINE_CONFIG,
    RANKING_CONFIG,
    RAW_DATA_DIR,
    REPORTS_DIR,
    PipelineConfig,
)
from .engines.combine import combine_yearly_frames
from .engines.geo_enrich import join_geo_reference, load_geo_reference
from .engines.metrics import derive_per_recipient_metric
from .engines.national_summary import build_national_summary
from .engines.rankings import top_by_total_for_year, top_per_recipient_by_year
from .errors import CapabilityUnavailable, SelectionError
from .load_data import Source, discover_yearly_sources, load_yearly_sources

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:

    """

    Result tables of one pipeline run.

    national_summary:
        One row per program year, ascending (NationalSummary).
    top_states_per_year:
        Per-year top rows by per-recipient metric (TopStatesPerYear).
    top_total_selected:
        Top rows by total amount for selected_year (Top10Latest), or None when
        the selected year is absent.
    geo_joined:
        Polygon reference joined with selected_year's metric (GeoJoined), or
        None when no reference was available.
    total_top_k:
        K used for the top-total ranking; names the Top10Latest export.

    """

    corpus: pd.DataFrame
    national_summary: pd.DataFrame
    top_states_per_year: pd.DataFrame
    selected_year: int
    top_total_selected: pd.DataFrame | None = None
    geo_joined: pd.DataFrame | None = None
    selection_error: SelectionError | None = None
    geo_unavailable: CapabilityUnavailable | None = None
    total_top_k: int = RANKING_CONFIG.total_top_k

    @property
    def top_total_name(self) -> str:
        """Export name of the top-total table, e.g. top10_states_2024."""
        return f"top{self.total_top_k}_states_{self.selected_year}"

    def tables(self) -> dict[str, pd.DataFrame]:
        """Result tables that were produced, keyed by export name."""
        tables = {
            "national_summary": self.national_summary,
            "top_states_per_year": self.top_states_per_year,
        }
        if self.top_total_selected is not None:
            tables[self.top_total_name] = self.top_total_selected
        if self.geo_joined is not None:
            tables[f"geo_joined_{self.selected_year}"] = self.geo_joined
        return tables


def run_payments_pipeline(
    sources: Iterable[tuple[int, Source]],
    *,
    geo_reference: pd.DataFrame | None = None,
    config: PipelineConfig = PIPELINE_CONFIG,
) -> PipelineResult:
    """
    Run load -> combine -> derive -> aggregate -> rank -> geo join.

    Args:
        sources:
            Ordered (year, source) pairs; a source is a file path or DataFrame.
        geo_reference:
            Polygon vertex table. When None, config.geo.reference_path is
            tried; if that is unset or missing the geo join is skipped.
        config:
            Ranking sizes, selected year, geo settings and loader workers.

    Raises:
        SchemaError: a source lacks a required column.
        AggregationError: the sources hold no rows.
    """

    frames = load_yearly_sources(sources, max_workers=config.max_workers)
    corpus = derive_per_recipient_metric(combine_yearly_frames(frames))

    national_summary = build_national_summary(corpus)
    top_states_per_year = top_per_recipient_by_year(
        corpus, k=config.ranking.per_recipient_top_k
    )

    selected_year = config.ranking.selected_year
    if selected_year is None:
        selected_year = int(national_summary["year"].max())

    top_total_selected = None
    selection_error = None
    try:
        top_total_selected = top_by_total_for_year(
            corpus, selected_year, k=config.ranking.total_top_k
        )
    except SelectionError as exc:
        logger.error("Top-total ranking skipped: %s", exc)
        warnings.warn(str(exc), stacklevel=2)
        selection_error = exc

    geo_joined = None
    geo_unavailable = None
    try:
        if geo_reference is None:
            geo_reference = load_geo_reference(config.geo.reference_path)
        geo_joined = join_geo_reference(
            corpus,
            geo_reference,
            year=selected_year,
            key_column=config.geo.key_column,
        )
    except CapabilityUnavailable as exc:
        logger.warning("Geo join skipped: %s", exc)
        geo_unavailable = exc

    return PipelineResult(
        corpus=corpus,
        national_summary=national_summary,
        top_states_per_year=top_states_per_year,
        selected_year=selected_year,
        top_total_selected=top_total_selected,
        geo_joined=geo_joined,
        selection_error=selection_error,
        geo_unavailable=geo_unavailable,
        total_top_k=config.ranking.total_top_k,
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Summarize yearly Open Payments state extracts into report tables and figures."
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=RAW_DATA_DIR,
        help="Directory holding payments_YYYY.csv extracts",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=REPORTS_DIR,
        help="Destination directory for tables and figures",
    )
    parser.add_argument("--geo-reference", type=Path, default=None, help="Polygon vertex CSV")
    parser.add_argument("--selected-year", type=int, default=None, help="Year for the top-total chart")
    parser.add_argument("--max-workers", type=int, default=None, help="Threads used to load extracts")
    parser.add_argument("--no-figures", action="store_true", help="Write tables only")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:

    """

    Command-line entry point: discover extracts, run the pipeline, and hand
    the result tables to the export and figure collaborators.

    """

    # Collaborators are imported here so importing the pipeline does not pull
    # in matplotlib.
    from .outputs.export_utils import write_report_tables
    from .visualization.report_figures import save_report_figures

    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = replace(
        PIPELINE_CONFIG,
        ranking=replace(PIPELINE_CONFIG.ranking, selected_year=args.selected_year),
        geo=replace(PIPELINE_CONFIG.geo, reference_path=args.geo_reference),
        max_workers=args.max_workers,
    )

    sources = discover_yearly_sources(args.data_dir)
    result = run_payments_pipeline(sources, config=config)

    written = write_report_tables(result, args.out_dir)
    if not args.no_figures:
        written.update(save_report_figures(result, args.out_dir / "figures"))

    for label, path in written.items():
        print(f"Wrote {label} to: {path}")
    print("Analysis complete.")


if __name__ == "__main__":
    main()
