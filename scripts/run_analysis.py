"""Convenience launcher: compare measurement tables and write the test results."""
from __future__ import annotations

import argparse
from pathlib import Path

from morphometry.analysis import dataset_labels, run_anova, run_mann_whitney
from morphometry.config import load_config
from morphometry.io import load_dataset, write_test_results
from morphometry.utils import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Run ANOVA and Mann-Whitney tests across measurement tables")
    parser.add_argument("tables", type=Path, nargs="+", help="Measurement CSV files")
    parser.add_argument("--config", type=Path, default=None, help="Path to YAML configuration")
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.log_level)
    datasets = [load_dataset(path) for path in args.tables]
    anova = run_anova(datasets, config.stats.metrics, config.stats.max_workers)
    mann_whitney = run_mann_whitney(datasets, config.stats.metrics, config.stats.max_workers)
    labels = dataset_labels(datasets) if config.stats.generic_labels else None
    write_test_results(config.output_dir / "test_results.csv", anova, mann_whitney, labels=labels)


if __name__ == "__main__":
    main()
