#Docstring for the package
"""
Open Payments State Summary Pipeline

This package contains the core modules for:

- Loading yearly state-level Open Payments extracts
- Normalizing them into one longitudinal table
- Deriving the per-physician payment metric
- Building the national summary and the state rankings
- Joining one year onto a state polygon reference for mapping

Subpackages:
- core
- engines
- outputs
- visualization (imported on demand; pulls in matplotlib)

"""

#Import modules to be exposed at the package level
from . import core, engines, outputs
from .pipeline import PipelineResult, run_payments_pipeline

__all__ = [
    "core",
    "engines",
    "outputs",
    "PipelineResult",
    "run_payments_pipeline",
]
