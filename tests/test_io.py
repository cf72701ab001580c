import math

import numpy as np
import pytest

from morphometry.analysis import dataset_labels, run_anova, run_mann_whitney
from morphometry.data_models import AnovaResult
from morphometry.io import (
    load_dataset,
    read_contour,
    read_table,
    write_dataset_with_stats,
    write_measurements,
    write_test_results,
)
from morphometry.shapes import measure


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_read_table_skips_blank_lines_and_trims(tmp_path):
    path = _write(tmp_path / "a.csv", " ,Area , Circ.\n1, 10, 0.5\n\n2,12,\n")
    headers, rows = read_table(path)
    assert headers == ["", "Area", "Circ."]
    assert rows == [["1", "10", "0.5"], ["2", "12", ""]]


def test_load_dataset(tmp_path):
    path = _write(tmp_path / "ctrl.csv", "ROI,Area,Perim.,Notes\n1,10,12,ok\n2,14,15,\n")
    dataset = load_dataset(path)
    assert dataset.name == "ctrl.csv"
    assert dataset.headers == ("ROI", "Area", "Perimeter", "Notes")
    assert dataset.numeric_columns == (False, True, True, False)
    assert dataset.stats.means[1] == pytest.approx(12.0)


def test_load_dataset_with_trailing_commas(tmp_path):
    path = _write(tmp_path / "imagej.csv", "ROI,Area\n1,10,\n2,12,\n")
    headers, rows = read_table(path)
    assert headers == ["ROI", "Area"]
    assert rows == [["1", "10", ""], ["2", "12", ""]]
    dataset = load_dataset(path)
    assert dataset.rows == (("1", "10"), ("2", "12"))
    assert dataset.numeric_columns == (False, True)
    assert dataset.stats.means[1] == pytest.approx(11.0)


def test_load_dataset_with_short_rows(tmp_path):
    dataset = load_dataset(_write(tmp_path / "short.csv", "ROI,Area,Perim.\n1,10\n2,12,15\n"))
    assert dataset.rows == (("1", "10", ""), ("2", "12", "15"))
    assert dataset.stats.means[2] == pytest.approx(7.5)


def test_load_dataset_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dataset(tmp_path / "missing.csv")
    with pytest.raises(ValueError):
        load_dataset(_write(tmp_path / "empty.csv", ""))
    with pytest.raises(ValueError):
        load_dataset(_write(tmp_path / "header_only.csv", "Area,Perimeter\n"))


def test_read_contour_with_and_without_header(tmp_path):
    with_header = _write(tmp_path / "roi.csv", "y,x\n0,0\n0,2\n2,2\n2,0\n")
    pts = read_contour(with_header)
    assert pts.tolist() == [[0, 0], [2, 0], [2, 2], [0, 2]]
    assert measure(pts).area == pytest.approx(4.0)

    bare = _write(tmp_path / "bare.csv", "0,0\n3,0\n0,4\n")
    assert read_contour(bare).shape == (3, 2)

    with pytest.raises(ValueError):
        read_contour(_write(tmp_path / "bad.csv", "x,y\n1,a\n"))


def test_write_measurements(tmp_path):
    path = write_measurements([measure([(0, 0), (1, 0), (1, 1), (0, 1)])], tmp_path / "out" / "m.csv", decimals=3)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "ROI,Area,Perimeter,Circularity,AR,Roundness,Solidity"
    assert lines[1].startswith("ROI 1,1.000,4.000,")
    # Written tables load back as datasets with all six metrics numeric.
    assert load_dataset(path).numeric_columns == (False,) + (True,) * 6


def test_write_dataset_with_stats(tmp_path):
    dataset = load_dataset(_write(tmp_path / "d.csv", "ROI,Area\n1,1\n2,2\n3,3\n"))
    path = write_dataset_with_stats(dataset, tmp_path / "d_with_stats.csv", decimals=2)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[-2:] == ["Mean,2.00", "SD,1.00"]


def test_write_test_results(tmp_path):
    first = load_dataset(_write(tmp_path / "a.csv", "Area\n1\n2\n3\n"))
    second = load_dataset(_write(tmp_path / "b.csv", "Area\n4\n5\n6\n"))
    datasets = [first, second]
    anova = run_anova(datasets) + [AnovaResult(metric="Solidity", f=math.inf, p=0.0)]
    path = write_test_results(
        tmp_path / "tests.csv",
        anova,
        run_mann_whitney(datasets),
        labels=dataset_labels(datasets),
    )
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "ANOVA Results"
    assert lines[1] == "Metric,F,p"
    assert lines[2].startswith("Area,13.5000,")
    assert lines[3] == "Solidity,Infinity,0.000e+00"
    assert "Mann-Whitney Results" in lines
    assert any(line.startswith("Dataset 1 vs Dataset 2,Area,0.00,") for line in lines)
    assert lines[-1].startswith("Note: Dataset labels are generic")


def test_write_test_results_requires_results(tmp_path):
    with pytest.raises(ValueError):
        write_test_results(tmp_path / "x.csv")
