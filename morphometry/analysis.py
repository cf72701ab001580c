"""Higher level analysis routines over collections of datasets."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

import numpy as np
import pandas as pd

from .anova import one_way_anova
from .data_models import METRICS, AnovaResult, Dataset, Histogram, MannWhitneyResult
from .datasets import column_values
from .mann_whitney import two_sample_test

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run_jobs(jobs: Sequence[Callable[[], Optional[T]]], max_workers: int) -> List[T]:
    # Jobs are independent; results keep submission order either way.
    if max_workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(lambda job: job(), jobs))
    else:
        outcomes = [job() for job in jobs]
    return [outcome for outcome in outcomes if outcome is not None]


def run_anova(datasets: Sequence[Dataset], metrics: Sequence[str] = METRICS, max_workers: int = 1) -> List[AnovaResult]:
    jobs = []
    for metric in metrics:
        groups = []
        for dataset in datasets:
            values = column_values(dataset, metric)
            if values:
                groups.append(values)
        if len(groups) < 2:
            logger.debug("Skipping ANOVA for %s: %d usable datasets", metric, len(groups))
            continue
        jobs.append(lambda groups=groups, metric=metric: one_way_anova(groups, metric=metric))
    results = _run_jobs(jobs, max_workers)
    logger.info("ANOVA computed for %d of %d metrics", len(results), len(metrics))
    return results


def run_mann_whitney(datasets: Sequence[Dataset], metrics: Sequence[str] = METRICS, max_workers: int = 1) -> List[MannWhitneyResult]:
    jobs = []
    for i, first in enumerate(datasets):
        for second in datasets[i + 1:]:
            pair_label = f"{first.name} vs {second.name}"
            for metric in metrics:
                a = column_values(first, metric)
                b = column_values(second, metric)
                if not a or not b:
                    continue
                jobs.append(
                    lambda a=a, b=b, metric=metric, pair_label=pair_label: two_sample_test(
                        a, b, metric=metric, pair_label=pair_label
                    )
                )
    results = _run_jobs(jobs, max_workers)
    logger.info("Mann-Whitney computed for %d dataset/metric combinations", len(results))
    return results


def dataset_labels(datasets: Sequence[Dataset]) -> Dict[str, str]:
    return {dataset.name: f"Dataset {i}" for i, dataset in enumerate(datasets, start=1)}


def generic_pair_label(pair_label: str, labels: Dict[str, str]) -> str:
    parts = pair_label.split(" vs ")
    if len(parts) != 2:
        return pair_label
    return " vs ".join(labels.get(part, part) for part in parts)


def results_to_dataframe(results: Sequence[object]) -> pd.DataFrame:
    return pd.DataFrame([asdict(result) for result in results])


def metric_means(datasets: Sequence[Dataset], metric: str) -> pd.DataFrame:
    rows = []
    for dataset in datasets:
        col = dataset.column_index(metric)
        if col < 0 or not dataset.numeric_columns[col]:
            continue
        mean = dataset.stats.means[col]
        if mean is None:
            continue
        rows.append({"dataset": dataset.name, "mean": mean})
    return pd.DataFrame(rows, columns=["dataset", "mean"])


def histogram(values: Sequence[float], bins: int = 10) -> Optional[Histogram]:
    data = np.asarray(values, dtype=float)
    data = data[np.isfinite(data)]
    if data.size == 0 or bins < 1:
        return None
    low, high = float(data.min()), float(data.max())
    if low == high:
        return None
    width = (high - low) / bins
    # The maximum lands in the last bin rather than one past it.
    idx = np.clip(np.floor((data - low) / width).astype(int), 0, bins - 1)
    counts = np.bincount(idx, minlength=bins)
    edges = low + width * np.arange(bins + 1)
    labels = tuple(f"{edges[i]:.1f}-{edges[i + 1]:.1f}" for i in range(bins))
    return Histogram(counts=tuple(int(c) for c in counts), edges=tuple(float(e) for e in edges), labels=labels)
