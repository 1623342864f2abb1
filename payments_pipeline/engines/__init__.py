"""Pure DataFrame stages: combine, derive, aggregate, rank, and geo join."""
