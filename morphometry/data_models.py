"""Common data structures shared by the measurement and statistics modules."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np

METRICS: Tuple[str, ...] = ("Area", "Perimeter", "Circularity", "AR", "Roundness", "Solidity")


@dataclass(frozen=True)
class Point:
    """Planar coordinate in image/canvas space."""
    x: float
    y: float


ContourLike = Union[Sequence[Point], Sequence[Sequence[float]], np.ndarray]
GroupSample = Sequence[float]


@dataclass(frozen=True)
class ShapeMetrics:
    """The six canonical descriptors of one closed contour."""
    area: float = 0.0
    perimeter: float = 0.0
    circularity: float = 0.0
    aspect_ratio: float = 0.0
    roundness: float = 0.0
    solidity: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        values = (self.area, self.perimeter, self.circularity, self.aspect_ratio, self.roundness, self.solidity)
        return dict(zip(METRICS, values))


@dataclass(frozen=True)
class DescriptiveStats:
    """Row count plus per-column mean and sample SD (None for non-numeric columns)."""
    count: int
    means: Tuple[Optional[float], ...]
    sds: Tuple[Optional[float], ...]


@dataclass(frozen=True)
class Dataset:
    """One uploaded measurement table with its numeric columns and summary statistics."""
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    numeric_columns: Tuple[bool, ...]
    stats: DescriptiveStats
    name: str = ""

    def column_index(self, header: str) -> int:
        try:
            return self.headers.index(header)
        except ValueError:
            return -1


@dataclass(frozen=True)
class AnovaResult:
    """One-way ANOVA outcome for a single metric; f is math.inf on perfect separation."""
    metric: str
    f: float
    p: float


@dataclass(frozen=True)
class MannWhitneyResult:
    """Two-sample rank test outcome; u is the smaller one-sided statistic."""
    pair_label: str
    metric: str
    u: float
    p: float


@dataclass(frozen=True)
class Histogram:
    """Equal-width bin counts over the closed range of a sample."""
    counts: Tuple[int, ...]
    edges: Tuple[float, ...]
    labels: Tuple[str, ...] = ()
