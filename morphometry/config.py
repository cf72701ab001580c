"""Configuration loading utilities for measurement and statistics runs."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .data_models import METRICS
from .datasets import canonical_header
from .primitives import DEFAULT_ELLIPSE_SAMPLES


@dataclass
class MeasurementConfig:
    """Contour sampling and export precision for shape measurements."""
    ellipse_samples: int = DEFAULT_ELLIPSE_SAMPLES
    decimals: int = 6

    def __post_init__(self):
        if self.ellipse_samples < 3:
            raise ValueError(f"ellipse_samples must be >= 3, got {self.ellipse_samples}")
        if self.decimals < 0:
            raise ValueError(f"decimals must be >= 0, got {self.decimals}")


@dataclass
class StatsConfig:
    """Which metrics to test and how to run the tests."""
    metrics: Tuple[str, ...] = METRICS
    max_workers: int = 1
    histogram_bins: int = 10
    generic_labels: bool = True

    def __post_init__(self):
        # Accept header synonyms such as "circ" or "Aspect Ratio".
        canonical = tuple(canonical_header(m) for m in self.metrics)
        unknown = [raw for raw, name in zip(self.metrics, canonical) if name not in METRICS]
        if unknown:
            raise ValueError(f"Unknown metrics {unknown}; expected any of {list(METRICS)}")
        self.metrics = canonical
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.histogram_bins < 1:
            raise ValueError(f"histogram_bins must be >= 1, got {self.histogram_bins}")


@dataclass
class AppConfig:
    """Top-level container aggregating all configuration sections."""
    output_dir: Path = Path("results")
    measurement: MeasurementConfig = field(default_factory=MeasurementConfig)
    stats: StatsConfig = field(default_factory=StatsConfig)
    log_level: str = "INFO"

    def __post_init__(self):
        self.output_dir = Path(self.output_dir)
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level '{self.log_level}'")


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a mapping")
    return value


def load_config(path: Optional[Path]) -> AppConfig:
    if path is None:
        return AppConfig()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    stats_section = _section(data, "stats")
    if "metrics" in stats_section:
        stats_section["metrics"] = tuple(stats_section["metrics"])

    return AppConfig(
        output_dir=Path(data.get("output_dir", "results")),
        measurement=MeasurementConfig(**_section(data, "measurement")),
        stats=StatsConfig(**stats_section),
        log_level=data.get("log_level", "INFO"),
    )
