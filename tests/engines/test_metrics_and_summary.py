import pandas as pd
import pytest

from payments_pipeline.engines.combine import combine_yearly_frames
from payments_pipeline.engines.metrics import derive_per_recipient_metric
from payments_pipeline.engines.national_summary import build_national_summary
from payments_pipeline.errors import AggregationError, SchemaError


def _canonical(year: int, rows: list[tuple[str, float, float | None]]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "year": pd.array([year] * len(rows), dtype="Int64"),
            "region_name": pd.array([name for name, _, _ in rows], dtype="string"),
            "total_amount": [amount for _, amount, _ in rows],
            "recipient_count": pd.array(
                [pd.NA if count is None else count for _, _, count in rows], dtype="Float64"
            ),
        }
    )


def test_combine_preserves_order_and_keeps_duplicates() -> None:
    first = _canonical(2023, [("Ohio", 10.0, 1.0), ("Iowa", 20.0, 2.0)])
    second = _canonical(2023, [("Ohio", 30.0, 3.0)])

    corpus = combine_yearly_frames([first, second])

    assert corpus["region_name"].tolist() == ["Ohio", "Iowa", "Ohio"]
    assert corpus["total_amount"].tolist() == [10.0, 20.0, 30.0]
    assert list(corpus.index) == [0, 1, 2]


def test_combine_empty_input_has_canonical_columns() -> None:
    corpus = combine_yearly_frames([])

    assert corpus.empty is True
    assert list(corpus.columns) == ["year", "region_name", "total_amount", "recipient_count"]


def test_derive_metric_undefined_for_missing_or_zero_count() -> None:
    df = pd.DataFrame(
        {
            "total_amount": [100.0, 50.0, 80.0],
            "recipient_count": pd.array([10, 0, pd.NA], dtype="Float64"),
        }
    )

    result = derive_per_recipient_metric(df)

    assert result.loc[0, "per_recipient_metric"] == pytest.approx(10.0)
    assert pd.isna(result.loc[1, "per_recipient_metric"])
    assert pd.isna(result.loc[2, "per_recipient_metric"])
    assert str(result["per_recipient_metric"].dtype) == "Float64"
    # input is not mutated
    assert "per_recipient_metric" not in df.columns


def test_derive_metric_missing_columns() -> None:
    with pytest.raises(SchemaError, match="missing required columns"):
        derive_per_recipient_metric(pd.DataFrame({"total_amount": [1.0]}))


def test_national_summary_from_sums_not_average() -> None:
    corpus = derive_per_recipient_metric(
        combine_yearly_frames(
            [
                _canonical(2024, [("A", 200.0, 20.0)]),
                _canonical(2023, [("A", 100.0, 10.0), ("B", 50.0, None), ("C", 30.0, 1.0)]),
            ]
        )
    )

    summary = build_national_summary(corpus)

    assert summary["year"].tolist() == [2023, 2024]
    row = summary.set_index("year").loc[2023]
    assert row["total_amount_sum"] == pytest.approx(180.0)
    assert row["recipient_count_sum"] == pytest.approx(11.0)
    # (100 + 50 + 30) / 11, not mean(10, 30)
    assert row["national_per_recipient_metric"] == pytest.approx(180.0 / 11.0)


def test_national_summary_metric_times_count_equals_total() -> None:
    corpus = derive_per_recipient_metric(
        _canonical(2020, [("A", 1234.56, 7.0), ("B", 98.7, 3.0), ("C", 10.0, None)])
    )

    summary = build_national_summary(corpus)

    for _, row in summary.iterrows():
        assert row["national_per_recipient_metric"] * row["recipient_count_sum"] == pytest.approx(
            row["total_amount_sum"]
        )


def test_national_summary_year_without_counts_is_undefined() -> None:
    corpus = _canonical(2021, [("A", 10.0, None), ("B", 5.0, None)])

    summary = build_national_summary(corpus)

    assert summary.loc[0, "total_amount_sum"] == pytest.approx(15.0)
    assert summary.loc[0, "recipient_count_sum"] == 0
    assert pd.isna(summary.loc[0, "national_per_recipient_metric"])


def test_national_summary_one_row_per_year_ascending() -> None:
    corpus = combine_yearly_frames(
        [
            _canonical(2022, [("A", 1.0, 1.0), ("B", 1.0, 1.0)]),
            _canonical(2019, [("A", 1.0, 1.0)]),
            _canonical(2022, [("C", 1.0, 1.0)]),
        ]
    )

    summary = build_national_summary(corpus)

    assert summary["year"].tolist() == [2019, 2022]
    assert summary["year"].is_unique
    assert list(summary.columns) == [
        "year",
        "total_amount_sum",
        "recipient_count_sum",
        "national_per_recipient_metric",
    ]


def test_national_summary_empty_corpus_raises() -> None:
    with pytest.raises(AggregationError, match="no program years"):
        build_national_summary(combine_yearly_frames([]))
