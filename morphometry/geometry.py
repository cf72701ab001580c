"""Polygon geometry on sampled contours."""
from __future__ import annotations

from typing import List, Tuple

import numpy as np

from .data_models import ContourLike, Point


def as_points_array(contour: ContourLike) -> np.ndarray:
    """Return the contour as a float array of shape (N, 2)."""
    if isinstance(contour, np.ndarray):
        arr = contour.astype(float, copy=True)
    else:
        coords = [(p.x, p.y) if isinstance(p, Point) else (p[0], p[1]) for p in contour]
        arr = np.asarray(coords, dtype=float)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Contour must have shape (N, 2), got {arr.shape}")
    return arr


def polygon_area(contour: ContourLike) -> float:
    pts = as_points_array(contour)
    if len(pts) < 3:
        return 0.0
    x, y = pts[:, 0], pts[:, 1]
    # Shoelace over cyclic neighbours; the sign only encodes winding.
    x_next, y_next = np.roll(x, -1), np.roll(y, -1)
    signed = float(np.sum(x * y_next - x_next * y))
    return abs(signed) / 2.0


def polygon_perimeter(contour: ContourLike) -> float:
    pts = as_points_array(contour)
    if len(pts) < 2:
        return 0.0
    steps = np.roll(pts, -1, axis=0) - pts
    return float(np.hypot(steps[:, 0], steps[:, 1]).sum())


def _cross(o: Tuple[float, float], a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def convex_hull(contour: ContourLike) -> np.ndarray:
    """Andrew's monotone chain; collinear boundary points are dropped."""
    pts = as_points_array(contour)
    if len(pts) < 3:
        return pts
    ordered = sorted((float(x), float(y)) for x, y in pts)

    lower: List[Tuple[float, float]] = []
    for p in ordered:
        while len(lower) >= 2 and _cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper: List[Tuple[float, float]] = []
    for p in reversed(ordered):
        while len(upper) >= 2 and _cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    # Last point of each chain is the first point of the other.
    hull = lower[:-1] + upper[:-1]
    return np.asarray(hull, dtype=float).reshape(-1, 2)


def principal_axes(contour: ContourLike) -> Tuple[float, float]:
    """Major and minor axis lengths from the population covariance of the points."""
    pts = as_points_array(contour)
    if len(pts) < 3:
        return 0.0, 0.0
    centered = pts - pts.mean(axis=0)
    n = len(pts)
    sxx = float(np.dot(centered[:, 0], centered[:, 0])) / n
    syy = float(np.dot(centered[:, 1], centered[:, 1])) / n
    sxy = float(np.dot(centered[:, 0], centered[:, 1])) / n

    trace = sxx + syy
    det = sxx * syy - sxy * sxy
    term = np.sqrt(max(0.0, trace * trace / 4.0 - det))
    lambda_major = trace / 2.0 + term
    lambda_minor = trace / 2.0 - term
    major = 2.0 * np.sqrt(max(0.0, lambda_major))
    minor = 2.0 * np.sqrt(max(0.0, lambda_minor))
    return float(major), float(minor)
