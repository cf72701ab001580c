"""Measurement tables: header canonicalisation, numeric column detection and summary statistics."""
from __future__ import annotations

import logging
import math
import re
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from .data_models import METRICS, Dataset, DescriptiveStats

logger = logging.getLogger(__name__)

# Lower-cased, letters-only header -> canonical metric name.
HEADER_SYNONYMS: Dict[str, str] = {
    "area": "Area",
    "perimeter": "Perimeter",
    "perim": "Perimeter",
    "circularity": "Circularity",
    "circ": "Circularity",
    "ar": "AR",
    "aspectratio": "AR",
    "aspectrat": "AR",
    "aspectrati": "AR",
    "roundness": "Roundness",
    "round": "Roundness",
    "solidity": "Solidity",
}

_NON_ALPHA_RE = re.compile(r"[^a-z]")


def canonical_header(raw: str) -> str:
    header = str(raw).strip()
    key = _NON_ALPHA_RE.sub("", header.lower())
    return HEADER_SYNONYMS.get(key, header)


def parse_number(cell: str) -> Optional[float]:
    """Parse a table cell as a float; None for empty, non-numeric or non-finite cells."""
    text = str(cell).strip()
    if not text or "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def detect_numeric_columns(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> List[bool]:
    if not rows:
        return [False] * len(headers)
    flags = []
    for col, header in enumerate(headers):
        if header not in METRICS:
            flags.append(False)
            continue
        numeric = True
        for row in rows:
            cell = row[col].strip()
            # Blank cells are skipped rather than disqualifying the column.
            if cell and parse_number(cell) is None:
                numeric = False
                break
        flags.append(numeric)
    return flags


def _column_floats(rows: Sequence[Sequence[str]], col: int) -> List[float]:
    values = []
    for row in rows:
        value = parse_number(row[col])
        if value is not None:
            values.append(value)
    return values


def compute_stats(rows: Sequence[Sequence[str]], numeric_columns: Sequence[bool]) -> DescriptiveStats:
    """Per-column mean and sample SD of a dataset's rows.

    Takes the pieces of a :class:`Dataset` rather than the dataset itself because
    it runs during :func:`ingest`, before the dataset exists; an existing dataset
    carries the result as ``dataset.stats``.
    Every row counts towards ``n``, so a blank cell weighs in as zero.
    """
    n = len(rows)
    means: List[Optional[float]] = [None] * len(numeric_columns)
    sds: List[Optional[float]] = [None] * len(numeric_columns)
    if n == 0:
        return DescriptiveStats(count=0, means=tuple(means), sds=tuple(sds))
    for col, is_numeric in enumerate(numeric_columns):
        if not is_numeric:
            continue
        values = _column_floats(rows, col)
        total = math.fsum(values)
        total_sq = math.fsum(v * v for v in values)
        variance = (total_sq - total * total / n) / (n - 1) if n > 1 else 0.0
        means[col] = total / n
        # Cancellation can leave a tiny negative variance.
        sds[col] = math.sqrt(max(0.0, variance))
    return DescriptiveStats(count=n, means=tuple(means), sds=tuple(sds))


def _normalise_row(row: Sequence[str], width: int) -> tuple:
    cells = [str(cell).strip() for cell in row[:width]]
    cells.extend([""] * (width - len(cells)))
    return tuple(cells)


def ingest(headers: Sequence[str], raw_rows: Iterable[Sequence[str]], name: str = "") -> Dataset:
    canonical = tuple(canonical_header(h) for h in headers)
    rows = tuple(_normalise_row(row, len(canonical)) for row in raw_rows)
    numeric_columns = tuple(detect_numeric_columns(canonical, rows))
    stats = compute_stats(rows, numeric_columns)
    logger.debug(
        "Ingested %r: %d rows, numeric metrics %s",
        name,
        len(rows),
        [h for h, flag in zip(canonical, numeric_columns) if flag],
    )
    return Dataset(headers=canonical, rows=rows, numeric_columns=numeric_columns, stats=stats, name=name)


def column_values(dataset: Dataset, metric: str) -> Optional[List[float]]:
    col = dataset.column_index(metric)
    if col < 0 or not dataset.numeric_columns[col]:
        return None
    return _column_floats(dataset.rows, col)


def numeric_metrics(datasets: Iterable[Dataset]) -> List[str]:
    seen: List[str] = []
    for dataset in datasets:
        for header, is_numeric in zip(dataset.headers, dataset.numeric_columns):
            if is_numeric and header not in seen:
                seen.append(header)
    return seen


def with_summary_rows(dataset: Dataset, decimals: int = 6) -> List[List[str]]:
    """Header, data rows, then "Mean" and "SD" rows with the first cell used as the label."""
    table = [list(dataset.headers)]
    table.extend(list(row) for row in dataset.rows)
    for label, values in (("Mean", dataset.stats.means), ("SD", dataset.stats.sds)):
        summary = []
        for col, value in enumerate(values):
            if col == 0:
                summary.append(label)
            elif dataset.numeric_columns[col] and value is not None:
                summary.append(f"{value:.{decimals}f}")
            else:
                summary.append("")
        table.append(summary)
    return table


def to_frame(dataset: Dataset) -> pd.DataFrame:
    columns = []
    for col, is_numeric in enumerate(dataset.numeric_columns):
        if is_numeric:
            series = pd.Series([parse_number(row[col]) for row in dataset.rows], dtype=float)
        else:
            series = pd.Series([row[col] for row in dataset.rows], dtype=object)
        columns.append(series)
    if not columns:
        return pd.DataFrame()
    df = pd.concat(columns, axis=1)
    df.columns = list(dataset.headers)
    return df
