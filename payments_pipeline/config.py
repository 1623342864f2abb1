#Docstring for payments_pipeline/config module
"""
config.py

Central configuration for the Open Payments state summary pipeline.

This module defines canonical column mappings, required/optional column
selections, output table layouts, and the ranking/geo parameters used across
the project.

It is intentionally the single source of truth for:
- Column standardization (raw extract headers -> canonical names)
- Required vs optional columns of a yearly extract
- Ranking controls (top-K sizes, selected year for the raw-total ranking)
- Geo reference settings for the choropleth join

Contents
--------
1) Paths and project defaults
   - Default input/output folders (nothing is created at import time;
     writers create parent folders on demand)

2) Column mappings
   - PAYMENTS_COLUMN_MAP: raw extract header -> canonical column name
   These mappings allow yearly extracts with the published CMS headers to be
   normalized into one schema.

3) Table layouts
   - CANONICAL_COLUMNS / DERIVED_COLUMNS / NATIONAL_SUMMARY_COLUMNS
   - GEO_REFERENCE_COLUMNS: polygon vertex table layout

4) Pipeline configuration
   - RankingConfig / GeoConfig / PipelineConfig (frozen dataclasses)

Usage
-----
All other modules import configuration from here. Example:

    from payments_pipeline.config import PAYMENTS_COLUMN_MAP, RANKING_CONFIG
"""


from dataclasses import dataclass, field #create simple classes for configuration
from pathlib import Path #object-oriented filesystem paths instead of strings



# --- Base paths ----------------------------------------------------------------

# payments_pipeline/ -> project root
BASE_DIR = Path(__file__).resolve().parents[1]

DATA_DIR = BASE_DIR / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
SAMPLE_DIR = DATA_DIR / "sample"
GEO_DIR = DATA_DIR / "geo"

REPORTS_DIR = BASE_DIR / "report"
REPORTS_FIGURES_DIR = REPORTS_DIR / "figures"
REPORTS_OUTPUTS_DIR = REPORTS_DIR / "outputs"

# One file per program year, e.g. payments_2024.csv
SOURCE_FILE_PATTERN = r"^payments_(\d{4})\.csv$"



# --- Column name mapping (raw -> canonical) --------------------------------------------

# Left side keys match the headers of the aggregated Open Payments
# "general payments to physicians by state" extracts.
# Canonical names are what the rest of the pipeline will use.

PAYMENTS_COLUMN_MAP = {
    # Raw column name                     # Canonical name
    "Program_Year":                       "year",
    "State_Name":                         "region_name",
    "Total_Payment_Amount_Physician":     "total_amount",
    "Total_Number_of_Physicians":         "recipient_count",
}



# --- Table layouts ----------------------------------------------------------------

# A yearly extract is rejected when any of these is missing after renaming.
REQUIRED_COLUMNS = [
    "region_name",
    "total_amount",
    "recipient_count",
]

# The year column is optional: every row is tagged with its source year.
OPTIONAL_COLUMNS = [
    "year",
]

CANONICAL_COLUMNS = [
    "year",
    "region_name",
    "total_amount",
    "recipient_count",
]

DERIVED_COLUMNS = CANONICAL_COLUMNS + ["per_recipient_metric"]

NATIONAL_SUMMARY_COLUMNS = [
    "year",
    "total_amount_sum",
    "recipient_count_sum",
    "national_per_recipient_metric",
]

# Polygon vertex table, same layout as R's maps::map_data("state")
GEO_REFERENCE_COLUMNS = [
    "long",
    "lat",
    "group",
    "order",
    "region",
]



# --- Pipeline configuration ------------------------------------------------------------

@dataclass(frozen=True)
class RankingConfig:

    """

    Configuration for the two ranking outputs.

    per_recipient_top_k:
        Rows kept per year in the per-recipient ranking (TopStatesPerYear).
    total_top_k:
        Rows kept in the raw-total ranking of one selected year (Top10Latest).
    selected_year:
        Year for the raw-total ranking and the geo join. None selects the
        latest year present in the corpus.

    """

    per_recipient_top_k: int = 5
    total_top_k: int = 10
    selected_year: int | None = None


RANKING_CONFIG = RankingConfig()



@dataclass(frozen=True)
class GeoConfig:

    """

    Configuration for the optional geo join.

    reference_path:
        CSV file holding the polygon vertex table. None means the reference
        is supplied in memory, or not at all.
    key_column:
        Column of the reference table holding the lowercased region name.

    """

    reference_path: Path | None = None
    key_column: str = "region"


GEO_CONFIG = GeoConfig()



@dataclass(frozen=True)
class PipelineConfig:

    """Top-level run settings; max_workers > 1 loads sources on a thread pool."""

    ranking: RankingConfig = field(default_factory=RankingConfig)
    geo: GeoConfig = field(default_factory=GeoConfig)
    max_workers: int | None = None


PIPELINE_CONFIG = PipelineConfig()
