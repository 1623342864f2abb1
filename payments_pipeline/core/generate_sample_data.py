"""
generate_sample_data.py

Seeded generator for synthetic yearly Open Payments state extracts.

This script writes one CSV per program year (payments_YYYY.csv) into
data/sample/, using the raw headers from PAYMENTS_COLUMN_MAP so the loader's
schema checks pass, plus a synthetic polygon reference (one rectangle per
state on a grid) for the choropleth join. Outputs are deterministic for a
given seed and include edge-case rows: a zero physician count, a blank
physician count, a year written as text, and one polygon region with no data.
"""

from __future__ import annotations

import argparse
import random
from pathlib import Path

import pandas as pd

from ..config import GEO_REFERENCE_COLUMNS, PAYMENTS_COLUMN_MAP, SAMPLE_DIR


DEFAULT_SEED = 20250214
DEFAULT_YEARS = tuple(range(2018, 2025))

US_STATES = [
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado",
    "Connecticut", "Delaware", "District of Columbia", "Florida", "Georgia",
    "Hawaii", "Idaho", "Illinois", "Indiana", "Iowa", "Kansas", "Kentucky",
    "Louisiana", "Maine", "Maryland", "Massachusetts", "Michigan", "Minnesota",
    "Mississippi", "Missouri", "Montana", "Nebraska", "Nevada", "New Hampshire",
    "New Jersey", "New Mexico", "New York", "North Carolina", "North Dakota",
    "Ohio", "Oklahoma", "Oregon", "Pennsylvania", "Rhode Island",
    "South Carolina", "South Dakota", "Tennessee", "Texas", "Utah", "Vermont",
    "Virginia", "Washington", "West Virginia", "Wisconsin", "Wyoming",
]

# Present in the polygon reference only
POLYGON_ONLY_REGIONS = ["puerto rico"]

RAW_HEADERS = {canonical: raw for raw, canonical in PAYMENTS_COLUMN_MAP.items()}


def _amount(rng: random.Random, low: float, high: float) -> float:
    value = rng.uniform(low, high)
    return round(value, 2)


def _build_year(rng: random.Random, year: int, growth: float) -> pd.DataFrame:
    rows = []
    for state in US_STATES:
        physicians = rng.randint(800, 90_000)
        per_physician = _amount(rng, 900, 4_500) * growth
        rows.append(
            {
                "year": year,
                "region_name": state,
                "total_amount": round(physicians * per_physician, 2),
                "recipient_count": physicians,
            }
        )
    df = pd.DataFrame(rows)

    # Edge cases the pipeline must carry without dividing
    df.loc[df["region_name"] == "Wyoming", "recipient_count"] = 0
    if year % 2 == 0:
        df["recipient_count"] = df["recipient_count"].astype("Int64")
        df.loc[df["region_name"] == "Vermont", "recipient_count"] = pd.NA
    if year == DEFAULT_YEARS[0]:
        df["year"] = df["year"].astype(str)

    return df.rename(columns=RAW_HEADERS)


def _build_polygon_reference(columns: int = 8) -> pd.DataFrame:
    regions = [state.lower() for state in US_STATES] + POLYGON_ONLY_REGIONS
    rows = []
    order = 1
    for group, region in enumerate(regions, start=1):
        col = (group - 1) % columns
        row = (group - 1) // columns
        x0, y0 = -125.0 + col * 7.0, 49.0 - row * 3.5
        corners = [(x0, y0), (x0 + 6.5, y0), (x0 + 6.5, y0 - 3.0), (x0, y0 - 3.0), (x0, y0)]
        for long, lat in corners:
            rows.append({"long": long, "lat": lat, "group": group, "order": order, "region": region})
            order += 1
    return pd.DataFrame(rows, columns=GEO_REFERENCE_COLUMNS)


def generate_sample_data(
    output_dir: Path = SAMPLE_DIR,
    seed: int = DEFAULT_SEED,
    years: tuple[int, ...] = DEFAULT_YEARS,
) -> dict[str, Path]:
    rng = random.Random(seed)
    output_dir.mkdir(parents=True, exist_ok=True)

    outputs: dict[str, Path] = {}
    for offset, year in enumerate(years):
        growth = 1.0 + 0.04 * offset
        path = output_dir / f"payments_{year}.csv"
        _build_year(rng, year, growth).to_csv(path, index=False)
        outputs[str(year)] = path

    geo_path = output_dir / "state_polygons.csv"
    _build_polygon_reference().to_csv(geo_path, index=False)
    outputs["state_polygons"] = geo_path

    return outputs


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate seeded synthetic yearly Open Payments state extracts."
    )
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Deterministic RNG seed")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=SAMPLE_DIR,
        help="Destination directory for sample CSV files",
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    outputs = generate_sample_data(output_dir=args.output_dir, seed=args.seed)
    for label, path in outputs.items():
        print(f"Wrote {label} sample to: {path}")


if __name__ == "__main__":
    main()
