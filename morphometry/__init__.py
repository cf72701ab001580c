"""Morphometric measurement of drawn shapes and statistical comparison of measurement tables."""
from __future__ import annotations

from .anova import one_way_anova
from .data_models import (
    METRICS,
    AnovaResult,
    Dataset,
    DescriptiveStats,
    MannWhitneyResult,
    Point,
    ShapeMetrics,
)
from .datasets import compute_stats, ingest
from .mann_whitney import two_sample_test
from .shapes import measure

__version__ = "0.1.0"

__all__ = [
    "METRICS",
    "AnovaResult",
    "Dataset",
    "DescriptiveStats",
    "MannWhitneyResult",
    "Point",
    "ShapeMetrics",
    "compute_stats",
    "ingest",
    "measure",
    "one_way_anova",
    "two_sample_test",
]
