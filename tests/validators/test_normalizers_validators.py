import pandas as pd
import pytest

from payments_pipeline.core.normalizers import (
    coerce_year_series,
    normalize_recipient_count_series,
    normalize_region_name_series,
    region_key_series,
    to_numeric_series,
)
from payments_pipeline.core.validators import (
    build_validation_issues,
    duplicate_region_mask,
    validate_amounts_series,
    validate_counts_series,
    validate_required_columns,
)
from payments_pipeline.errors import SchemaError


def test_coerce_year_series_mixed_representations() -> None:
    series = pd.Series(["2023", 2024.0, " 2019 ", None, "abc", 2020.5], dtype=object)

    result = coerce_year_series(series)

    assert str(result.dtype) == "Int64"
    assert result.iloc[:3].tolist() == [2023, 2024, 2019]
    assert result.iloc[3:].isna().all()


def test_normalize_recipient_count_zero_is_missing() -> None:
    result = normalize_recipient_count_series(pd.Series([10, 0, None, "1,500"], dtype=object))

    assert str(result.dtype) == "Float64"
    assert result.iloc[0] == 10
    assert pd.isna(result.iloc[1])
    assert pd.isna(result.iloc[2])
    assert result.iloc[3] == 1500


def test_to_numeric_series_strips_currency() -> None:
    result = to_numeric_series(pd.Series(["$1,000.25", "n/a", 7]))

    assert result.iloc[0] == pytest.approx(1000.25)
    assert pd.isna(result.iloc[1])
    assert result.iloc[2] == 7.0


def test_region_name_and_key() -> None:
    names = pd.Series(["  North   Carolina ", "", None])

    assert normalize_region_name_series(names).iloc[0] == "North Carolina"
    assert normalize_region_name_series(names).iloc[1:].isna().all()
    assert region_key_series(names).iloc[0] == "north carolina"


def test_validate_required_columns_lists_missing() -> None:
    df = pd.DataFrame({"region_name": ["Ohio"]})

    with pytest.raises(SchemaError, match=r"\['total_amount'\]"):
        validate_required_columns(df, ["region_name", "total_amount"], source_name="Test")


def test_validate_amounts_and_counts() -> None:
    amounts = pd.Series([100.0, -1.0, None, float("inf")])
    counts = pd.Series([10.0, None, 2.5, -3.0])

    assert validate_amounts_series(amounts).tolist() == [True, False, False, False]
    assert validate_counts_series(counts).tolist() == [True, True, False, False]


def test_duplicate_region_mask_and_issue_builder() -> None:
    df = pd.DataFrame(
        {
            "year": [2023, 2023, 2024],
            "region_name": ["Ohio", "Ohio", "Ohio"],
        }
    )

    duplicates = duplicate_region_mask(df)
    assert duplicates.tolist() == [True, True, False]

    issues = build_validation_issues(
        pd.Series([True, False, True]),
        pd.Series([True, True, False]),
        duplicates,
    )

    assert issues.tolist() == [
        ["duplicate_region_year"],
        ["amount_invalid", "duplicate_region_year"],
        ["recipient_count_invalid"],
    ]


def test_build_validation_issues_repeated_index_labels() -> None:
    index = [7, 7]

    issues = build_validation_issues(
        pd.Series([False, True], index=index, dtype="boolean"),
        pd.Series([True, True], index=index, dtype="boolean"),
        pd.Series([False, False], index=index, dtype="boolean"),
    )

    assert list(issues.index) == index
    assert issues.tolist() == [["amount_invalid"], []]
