"""
combine.py

Corpus combiner: concatenates the per-year Regional Record frames into one
longitudinal table.

The combine is a plain concatenation in input order. It does not deduplicate
and does not check that years are disjoint; a region/year pair delivered twice
survives twice and every later stage sees both rows.

Public API
----------
- combine_yearly_frames(frames) -> pd.DataFrame
"""

from __future__ import annotations

import logging
from typing import Sequence

import pandas as pd

from ..config import CANONICAL_COLUMNS
from ..core.validators import duplicate_region_mask

logger = logging.getLogger(__name__)


def _empty_corpus() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "year": pd.Series(dtype="Int64"),
            "region_name": pd.Series(dtype="string"),
            "total_amount": pd.Series(dtype="float64"),
            "recipient_count": pd.Series(dtype="Float64"),
        }
    )[CANONICAL_COLUMNS]


def combine_yearly_frames(frames: Sequence[pd.DataFrame]) -> pd.DataFrame:
    """
    Concatenate per-year frames, preserving source order and intra-source order.

    Returns a new frame with a fresh RangeIndex. An empty input yields an empty
    frame with the canonical columns.
    """

    non_empty = [frame for frame in frames if not frame.empty]
    if not non_empty:
        return _empty_corpus()

    corpus = pd.concat(non_empty, ignore_index=True)[CANONICAL_COLUMNS]

    duplicates = duplicate_region_mask(corpus)
    duplicate_count = int(duplicates.sum())
    if duplicate_count:
        logger.warning(
            "Corpus holds %d rows sharing a (year, region_name) pair; keeping all of them.",
            duplicate_count,
        )

    logger.info(
        "Combined %d sources into %d rows across %d years",
        len(frames),
        len(corpus),
        corpus["year"].nunique(),
    )
    return corpus
