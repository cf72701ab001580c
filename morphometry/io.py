"""Reading measurement tables and contours, writing result tables."""
from __future__ import annotations

import logging
import math
from io import StringIO
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .analysis import generic_pair_label
from .data_models import AnovaResult, Dataset, MannWhitneyResult, ShapeMetrics
from .datasets import ingest, parse_number, with_summary_rows
from .shapes import metrics_to_dataframe
from .utils import ensure_dir

logger = logging.getLogger(__name__)

GENERIC_LABEL_NOTE = (
    "Note: Dataset labels are generic (Dataset 1, Dataset 2, etc.). "
    "You can download this file and rename datasets as per your convenience."
)


def _read_raw(path: Path) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    text = path.read_text(encoding="utf-8-sig")
    # Ragged rows (e.g. trailing commas) are kept; ingest pads or truncates them.
    width = max((line.count(",") + 1 for line in text.splitlines() if line.strip()), default=0)
    if width == 0:
        return pd.DataFrame()
    try:
        df = pd.read_csv(
            StringIO(text),
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.ParserError as exc:
        raise ValueError(f"Could not parse {path.name}: {exc}") from exc
    df = df.fillna("").apply(lambda col: col.str.strip())
    # Lines holding only separators or whitespace count as blank.
    return df[(df != "").any(axis=1)].reset_index(drop=True)


def read_table(path: Path) -> Tuple[List[str], List[List[str]]]:
    df = _read_raw(path)
    if df.empty:
        return [], []
    headers = df.iloc[0].tolist()
    # Empty trailing header cells only come from rows wider than the header line.
    while headers and headers[-1] == "":
        headers.pop()
    rows = df.iloc[1:].values.tolist()
    return headers, rows


def load_dataset(path: Path) -> Dataset:
    path = Path(path)
    headers, rows = read_table(path)
    if not headers or not rows:
        raise ValueError(f"{path.name} is empty or invalid")
    dataset = ingest(headers, rows, name=path.name)
    logger.info("Loaded %s with %d rows", path.name, len(dataset.rows))
    return dataset


def read_contour(path: Path) -> np.ndarray:
    """Read points from a CSV with x,y columns (header optional)."""
    df = _read_raw(path)
    if df.empty:
        return np.zeros((0, 2), dtype=float)
    if df.shape[1] < 2:
        raise ValueError(f"{Path(path).name} needs at least two columns")

    first = df.iloc[0].tolist()
    if any(parse_number(cell) is None for cell in first[:2]):
        lowered = [str(cell).lower() for cell in first]
        x_col = lowered.index("x") if "x" in lowered else 0
        y_col = lowered.index("y") if "y" in lowered else 1
        df = df.iloc[1:]
    else:
        x_col, y_col = 0, 1

    points = []
    for x_cell, y_cell in zip(df.iloc[:, x_col], df.iloc[:, y_col]):
        x, y = parse_number(x_cell), parse_number(y_cell)
        if x is None or y is None:
            raise ValueError(f"Non-numeric point ({x_cell!r}, {y_cell!r}) in {Path(path).name}")
        points.append((x, y))
    return np.asarray(points, dtype=float).reshape(-1, 2)


def write_measurements(metrics: Sequence[ShapeMetrics], path: Path,
                       labels: Optional[Sequence[str]] = None, decimals: int = 6) -> Path:
    path = Path(path)
    ensure_dir(path.parent)
    metrics_to_dataframe(metrics, labels).to_csv(path, index=False, float_format=f"%.{decimals}f")
    logger.info("Wrote %d measurements to %s", len(metrics), path)
    return path


def write_dataset_with_stats(dataset: Dataset, path: Path, decimals: int = 6) -> Path:
    path = Path(path)
    ensure_dir(path.parent)
    pd.DataFrame(with_summary_rows(dataset, decimals)).to_csv(path, index=False, header=False)
    logger.info("Wrote %s with Mean/SD rows to %s", dataset.name, path)
    return path


def format_p(p: Optional[float]) -> str:
    if p is None or not math.isfinite(p):
        return "-"
    return f"{p:.3e}"


def format_f(f: float) -> str:
    return f"{f:.4f}" if math.isfinite(f) else "Infinity"


def write_test_results(path: Path, anova: Sequence[AnovaResult] = (),
                       mann_whitney: Sequence[MannWhitneyResult] = (),
                       labels: Optional[Dict[str, str]] = None) -> Path:
    """Write ANOVA and Mann-Whitney sections to one CSV, optionally with generic dataset labels."""
    if not anova and not mann_whitney:
        raise ValueError("No test results to write")
    path = Path(path)
    ensure_dir(path.parent)

    with path.open("w", encoding="utf-8", newline="") as fh:
        if anova:
            fh.write("ANOVA Results\n")
            table = pd.DataFrame(
                [(r.metric, format_f(r.f), format_p(r.p)) for r in anova],
                columns=["Metric", "F", "p"],
            )
            table.to_csv(fh, index=False, lineterminator="\n")
            fh.write("\n")
        if mann_whitney:
            fh.write("Mann-Whitney Results\n")
            table = pd.DataFrame(
                [
                    (
                        generic_pair_label(r.pair_label, labels) if labels else r.pair_label,
                        r.metric,
                        f"{r.u:.2f}",
                        format_p(r.p),
                    )
                    for r in mann_whitney
                ],
                columns=["Pair", "Metric", "U", "p"],
            )
            table.to_csv(fh, index=False, lineterminator="\n")
            fh.write("\n")
        if labels:
            fh.write(GENERIC_LABEL_NOTE + "\n")

    logger.info("Wrote %d ANOVA and %d Mann-Whitney results to %s", len(anova), len(mann_whitney), path)
    return path
