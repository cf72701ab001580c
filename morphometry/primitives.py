"""Drawn shape primitives that sample themselves into contours."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence, Tuple

import numpy as np

from .geometry import as_points_array

DEFAULT_ELLIPSE_SAMPLES = 180
_PATH_DRAW_COMMANDS = {"M", "L", "Q", "C"}
_PATH_TOKEN_RE = re.compile(r"[A-Za-z]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


class Shape(Protocol):
    def contour(self, samples: int = DEFAULT_ELLIPSE_SAMPLES) -> np.ndarray:
        ...


def affine(rotation_deg: float = 0.0, scale: Tuple[float, float] = (1.0, 1.0),
           translation: Tuple[float, float] = (0.0, 0.0)) -> np.ndarray:
    """Build a 2x3 matrix that scales, then rotates, then translates local coordinates."""
    theta = math.radians(rotation_deg)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    sx, sy = scale
    tx, ty = translation
    return np.array([
        [cos_t * sx, -sin_t * sy, tx],
        [sin_t * sx, cos_t * sy, ty],
    ], dtype=float)


def apply_transform(points: np.ndarray, transform: Optional[np.ndarray]) -> np.ndarray:
    if transform is None or len(points) == 0:
        return points
    matrix = np.asarray(transform, dtype=float)
    if matrix.shape != (2, 3):
        raise ValueError(f"Affine transform must be 2x3, got {matrix.shape}")
    return points @ matrix[:, :2].T + matrix[:, 2]


def _box_corners(left: float, top: float, right: float, bottom: float) -> np.ndarray:
    return np.array([[left, top], [right, top], [right, bottom], [left, bottom]], dtype=float)


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned box in local coordinates, placed by an optional affine transform."""
    left: float
    top: float
    width: float
    height: float
    transform: Optional[np.ndarray] = field(default=None, compare=False)

    def contour(self, samples: int = DEFAULT_ELLIPSE_SAMPLES) -> np.ndarray:
        # Corners in top-left, top-right, bottom-right, bottom-left order.
        corners = _box_corners(self.left, self.top, self.left + self.width, self.top + self.height)
        return apply_transform(corners, self.transform)


@dataclass(frozen=True)
class Ellipse:
    """Ellipse with radii rx, ry centred at (cx, cy)."""
    cx: float
    cy: float
    rx: float
    ry: float
    transform: Optional[np.ndarray] = field(default=None, compare=False)

    def contour(self, samples: int = DEFAULT_ELLIPSE_SAMPLES) -> np.ndarray:
        if samples < 3:
            raise ValueError(f"Ellipse needs at least 3 samples, got {samples}")
        t = 2.0 * np.pi * np.arange(samples) / samples
        pts = np.column_stack([self.cx + self.rx * np.cos(t), self.cy + self.ry * np.sin(t)])
        return apply_transform(pts, self.transform)


@dataclass(frozen=True)
class Polygon:
    """Closed polygon or polyline given by its vertices."""
    points: Tuple[Tuple[float, float], ...]
    transform: Optional[np.ndarray] = field(default=None, compare=False)

    def contour(self, samples: int = DEFAULT_ELLIPSE_SAMPLES) -> np.ndarray:
        return apply_transform(as_points_array(self.points), self.transform)


@dataclass(frozen=True)
class FreehandPath:
    """Freehand stroke stored as SVG-like commands, e.g. ("M", x, y), ("Q", cx, cy, x, y)."""
    commands: Tuple[Sequence, ...]
    transform: Optional[np.ndarray] = field(default=None, compare=False)

    def contour(self, samples: int = DEFAULT_ELLIPSE_SAMPLES) -> np.ndarray:
        vertices = []
        coords = []
        for command in self.commands:
            if not command:
                continue
            # Lower-case commands are relative moves and are not resolved here.
            op = str(command[0])
            values = [float(v) for v in command[1:]]
            coords.extend(zip(values[0::2], values[1::2]))
            # Curves contribute only their end point.
            if op in _PATH_DRAW_COMMANDS and len(values) >= 2:
                vertices.append((values[-2], values[-1]))

        if vertices:
            pts = np.asarray(vertices, dtype=float)
        elif coords:
            xy = np.asarray(coords, dtype=float)
            pts = _box_corners(xy[:, 0].min(), xy[:, 1].min(), xy[:, 0].max(), xy[:, 1].max())
        else:
            pts = np.zeros((0, 2), dtype=float)
        return apply_transform(pts, self.transform)


def parse_path(text: str) -> Tuple[Tuple, ...]:
    """Split a path string such as "M 0 0 L 4 0 Q 5 1 4 4" into command tuples."""
    commands = []
    for token in _PATH_TOKEN_RE.findall(text):
        if token.isalpha():
            commands.append([token])
        elif not commands:
            raise ValueError(f"Path must start with a command letter: {text!r}")
        else:
            commands[-1].append(float(token))
    return tuple(tuple(command) for command in commands)
