from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest

# tests/ is one level under the repo root
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def two_year_sources() -> list[tuple[int, pd.DataFrame]]:
    """2023: A=100/10, B=50/0 ; 2024: A=200/20 (raw extract headers)."""
    payments_2023 = pd.DataFrame(
        {
            "Program_Year": ["2023", "2023"],
            "State_Name": ["A", "B"],
            "Total_Payment_Amount_Physician": [100.0, 50.0],
            "Total_Number_of_Physicians": [10, 0],
        }
    )
    payments_2024 = pd.DataFrame(
        {
            "Program_Year": [2024.0],
            "State_Name": ["A"],
            "Total_Payment_Amount_Physician": [200.0],
            "Total_Number_of_Physicians": [20],
        }
    )
    return [(2023, payments_2023), (2024, payments_2024)]


@pytest.fixture
def derived_corpus() -> pd.DataFrame:
    """Canonical derived rows across two years with a missing and a zero count."""
    return pd.DataFrame(
        {
            "year": pd.array([2023, 2023, 2023, 2023, 2024, 2024], dtype="Int64"),
            "region_name": pd.array(
                ["Texas", "Ohio", "Iowa", "Utah", "Texas", "Ohio"], dtype="string"
            ),
            "total_amount": [300.0, 500.0, 90.0, 40.0, 400.0, 100.0],
            "recipient_count": pd.array([10, 50, pd.NA, 4, 20, 10], dtype="Float64"),
            "per_recipient_metric": pd.array(
                [30.0, 10.0, pd.NA, 10.0, 20.0, 10.0], dtype="Float64"
            ),
        }
    )
