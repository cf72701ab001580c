"""Command-line interface for shape measurement and dataset comparison."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from .analysis import dataset_labels, histogram, metric_means, results_to_dataframe, run_anova, run_mann_whitney
from .config import AppConfig, load_config
from .data_models import Dataset
from .datasets import numeric_metrics, to_frame
from .io import load_dataset, read_contour, write_dataset_with_stats, write_measurements, write_test_results
from .primitives import Ellipse, FreehandPath, Polygon, Rectangle, affine, parse_path
from .shapes import measure, measure_many, metrics_to_dataframe
from .utils import configure_logging

app = typer.Typer(add_completion=False, help="Measure drawn shapes and compare measurement tables.")


def _config(ctx: typer.Context) -> AppConfig:
    return ctx.obj


def _load_all(paths: List[Path]) -> List[Dataset]:
    try:
        return [load_dataset(path) for path in paths]
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Path to YAML configuration."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
) -> None:
    try:
        cfg = load_config(config)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    configure_logging("DEBUG" if verbose else cfg.log_level)
    ctx.obj = cfg


@app.command("measure")
def measure_cmd(
    ctx: typer.Context,
    contours: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="CSV files of x,y contour points."),
    output: Optional[Path] = typer.Option(None, help="Write measurements to this CSV."),
) -> None:
    """Measure one ROI per contour file."""
    cfg = _config(ctx)
    try:
        shapes = [Polygon(tuple(map(tuple, read_contour(path).tolist()))) for path in contours]
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    metrics = measure_many(shape.contour() for shape in shapes)
    labels = [path.stem for path in contours]
    typer.echo(metrics_to_dataframe(metrics, labels).to_string(index=False))
    if output is not None:
        write_measurements(metrics, output, labels=labels, decimals=cfg.measurement.decimals)


@app.command("shape")
def shape_cmd(
    ctx: typer.Context,
    kind: str = typer.Argument(..., help="rectangle, ellipse or path"),
    width: Optional[float] = typer.Option(None, help="Width (rectangle) or horizontal diameter (ellipse)."),
    height: Optional[float] = typer.Option(None, help="Height (rectangle) or vertical diameter (ellipse)."),
    path: Optional[str] = typer.Option(None, "--path", help='Path commands for freehand shapes, e.g. "M 0 0 L 4 0 L 4 3".'),
    rotation: float = typer.Option(0.0, help="Rotation in degrees."),
    samples: Optional[int] = typer.Option(None, help="Boundary samples for ellipses."),
) -> None:
    """Measure an ideal rectangle or ellipse, or a freehand path."""
    cfg = _config(ctx)
    transform = affine(rotation_deg=rotation)
    kind = kind.lower()
    if kind == "path":
        if not path:
            raise typer.BadParameter("--path is required for freehand shapes", param_hint="--path")
        try:
            shape = FreehandPath(parse_path(path), transform=transform)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--path") from exc
    elif kind in ("rectangle", "ellipse"):
        if width is None or height is None:
            raise typer.BadParameter(f"--width and --height are required for {kind}")
        if kind == "rectangle":
            shape = Rectangle(-width / 2.0, -height / 2.0, width, height, transform=transform)
        else:
            shape = Ellipse(0.0, 0.0, width / 2.0, height / 2.0, transform=transform)
    else:
        raise typer.BadParameter(f"Unknown shape '{kind}'", param_hint="KIND")
    metrics = measure(shape.contour(samples or cfg.measurement.ellipse_samples))
    for name, value in metrics.as_dict().items():
        typer.echo(f"{name}: {value:.{cfg.measurement.decimals}f}")


@app.command("describe")
def describe_cmd(
    ctx: typer.Context,
    tables: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Measurement CSV files."),
    export: bool = typer.Option(False, help="Write each table with Mean/SD rows to the output directory."),
) -> None:
    """Print count, mean and SD of every numeric metric column."""
    cfg = _config(ctx)
    for dataset in _load_all(tables):
        typer.echo(f"{dataset.name} (n={dataset.stats.count})")
        for col, header in enumerate(dataset.headers):
            if not dataset.numeric_columns[col] or dataset.stats.means[col] is None:
                continue
            typer.echo(f"  {header}: mean={dataset.stats.means[col]:.6g} sd={dataset.stats.sds[col]:.6g}")
        if export:
            stem = Path(dataset.name).stem
            write_dataset_with_stats(dataset, cfg.output_dir / f"{stem}_with_stats.csv", cfg.measurement.decimals)


@app.command("summary")
def summary_cmd(
    ctx: typer.Context,
    tables: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Measurement CSV files."),
) -> None:
    """Per-dataset means and value histograms of every metric."""
    cfg = _config(ctx)
    datasets = _load_all(tables)
    frames = [to_frame(dataset) for dataset in datasets]
    available = numeric_metrics(datasets)
    for metric in (m for m in cfg.stats.metrics if m in available):
        typer.echo(metric)
        typer.echo(metric_means(datasets, metric).to_string(index=False))
        for dataset, frame in zip(datasets, frames):
            col = dataset.column_index(metric)
            if col < 0 or not dataset.numeric_columns[col]:
                continue
            hist = histogram(frame.iloc[:, col].dropna().tolist(), cfg.stats.histogram_bins)
            if hist is None:
                typer.echo(f"  {dataset.name}: no spread to bin")
                continue
            typer.echo(f"  {dataset.name} histogram")
            for label, count in zip(hist.labels, hist.counts):
                typer.echo(f"    {label}: {count}")


def _run_tests(ctx: typer.Context, tables: List[Path], output: Optional[Path], anova: bool, mann_whitney: bool) -> None:
    cfg = _config(ctx)
    if len(tables) < 2:
        raise typer.BadParameter("Provide at least 2 measurement files.")
    datasets = _load_all(tables)
    anova_results = run_anova(datasets, cfg.stats.metrics, cfg.stats.max_workers) if anova else []
    mw_results = run_mann_whitney(datasets, cfg.stats.metrics, cfg.stats.max_workers) if mann_whitney else []
    for title, results in (("ANOVA", anova_results), ("Mann-Whitney", mw_results)):
        if results:
            typer.echo(title)
            typer.echo(results_to_dataframe(results).to_string(index=False))
    if not anova_results and not mw_results:
        typer.echo("No metric had enough data for a test.")
        raise typer.Exit(code=1)
    if output is not None:
        labels = dataset_labels(datasets) if cfg.stats.generic_labels else None
        write_test_results(output, anova_results, mw_results, labels=labels)


@app.command("anova")
def anova_cmd(
    ctx: typer.Context,
    tables: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Measurement CSV files, one per group."),
    output: Optional[Path] = typer.Option(None, help="Write results to this CSV."),
) -> None:
    """One-way ANOVA of every metric across the given files."""
    _run_tests(ctx, tables, output, anova=True, mann_whitney=False)


@app.command("mannwhitney")
def mann_whitney_cmd(
    ctx: typer.Context,
    tables: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Measurement CSV files."),
    output: Optional[Path] = typer.Option(None, help="Write results to this CSV."),
) -> None:
    """Mann-Whitney U test of every metric for each pair of files."""
    _run_tests(ctx, tables, output, anova=False, mann_whitney=True)


@app.command("compare")
def compare_cmd(
    ctx: typer.Context,
    tables: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Measurement CSV files."),
    output: Optional[Path] = typer.Option(None, help="Write results to this CSV."),
) -> None:
    """Run both ANOVA and pairwise Mann-Whitney tests."""
    _run_tests(ctx, tables, output, anova=True, mann_whitney=True)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
