"""Matplotlib figures built from the pipeline's result tables."""
