"""Writers for the pipeline's result tables."""
