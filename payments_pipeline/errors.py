"""
errors.py

Exception types raised by the payments pipeline.

SchemaError and AggregationError abort a run. SelectionError only voids the
single-year raw-total ranking, and CapabilityUnavailable only drops the geo
join; the orchestrator in `pipeline.py` catches those two and keeps going.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for payments pipeline errors."""


class SchemaError(PipelineError, ValueError):
    """A yearly extract is missing a required column."""


class AggregationError(PipelineError, ValueError):
    """The combined corpus holds no rows to aggregate."""


class SelectionError(PipelineError, LookupError):
    """The year selected for the raw-total ranking is not in the corpus."""

    def __init__(self, year: int, available_years: list[int] | None = None) -> None:
        self.year = year
        self.available_years = list(available_years or [])
        super().__init__(
            f"Selected year {year} not present in corpus. "
            f"Available years: {self.available_years}"
        )


class CapabilityUnavailable(PipelineError, RuntimeError):
    """An optional capability (the geo polygon reference) is not available."""
