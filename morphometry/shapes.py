"""Shape descriptor extraction."""
from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .data_models import METRICS, ContourLike, ShapeMetrics
from .geometry import as_points_array, convex_hull, polygon_area, polygon_perimeter, principal_axes

logger = logging.getLogger(__name__)


def measure(contour: ContourLike) -> ShapeMetrics:
    pts = as_points_array(contour)
    if len(pts) < 3:
        logger.debug("Contour with %d points measured as empty", len(pts))
        return ShapeMetrics()

    area = polygon_area(pts)
    perimeter = polygon_perimeter(pts)
    circularity = 4.0 * math.pi * area / (perimeter * perimeter) if perimeter > 0 else 0.0

    major, minor = principal_axes(pts)
    aspect_ratio = major / minor if minor > 0 else 0.0
    roundness = 4.0 * area / (math.pi * major * major) if major > 0 else 0.0

    convex_area = polygon_area(convex_hull(pts))
    solidity = area / convex_area if convex_area > 0 else 0.0

    return ShapeMetrics(
        area=area,
        perimeter=perimeter,
        circularity=circularity,
        aspect_ratio=aspect_ratio,
        roundness=roundness,
        solidity=solidity,
    )


def measure_many(contours: Iterable[ContourLike]) -> List[ShapeMetrics]:
    return [measure(contour) for contour in contours]


def metrics_to_dataframe(metrics: Sequence[ShapeMetrics], labels: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Tabulate metrics one ROI per row, labelled "ROI 1", "ROI 2", ... unless labels are given."""
    if labels is None:
        labels = [f"ROI {i}" for i in range(1, len(metrics) + 1)]
    if len(labels) != len(metrics):
        raise ValueError(f"Got {len(labels)} labels for {len(metrics)} measurements")
    rows = []
    for label, item in zip(labels, metrics):
        row = {"ROI": label}
        row.update(item.as_dict())
        rows.append(row)
    return pd.DataFrame(rows, columns=["ROI", *METRICS])
