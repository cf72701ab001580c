from typer.testing import CliRunner

from morphometry.__main__ import app

runner = CliRunner()


def _tables(tmp_path):
    first = tmp_path / "ctrl.csv"
    second = tmp_path / "treated.csv"
    first.write_text("ROI,Area,Circ.\n1,10,0.8\n2,12,0.7\n3,11,0.9\n", encoding="utf-8")
    second.write_text("ROI,Area,Circ.\n1,20,0.5\n2,22,0.6\n3,21,0.4\n", encoding="utf-8")
    return [str(first), str(second)]


def test_shape_command():
    result = runner.invoke(app, ["shape", "rectangle", "--width", "4", "--height", "2", "--rotation", "15"])
    assert result.exit_code == 0, result.output
    assert "Area: 8.000000" in result.output
    assert "AR: 2.000000" in result.output


def test_measure_command(tmp_path):
    roi = tmp_path / "roi.csv"
    roi.write_text("x,y\n0,0\n3,0\n3,3\n0,3\n", encoding="utf-8")
    output = tmp_path / "measurements.csv"
    result = runner.invoke(app, ["measure", str(roi), "--output", str(output)])
    assert result.exit_code == 0, result.output
    assert output.exists()
    assert output.read_text(encoding="utf-8").splitlines()[1].startswith("roi,9.000000")


def test_describe_with_export(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text(f"output_dir: {tmp_path / 'out'}\n", encoding="utf-8")
    result = runner.invoke(app, ["--config", str(config), "describe", "--export", *_tables(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Area: mean=11 sd=1" in result.output
    assert (tmp_path / "out" / "ctrl_with_stats.csv").exists()


def test_compare_writes_results(tmp_path):
    output = tmp_path / "tests.csv"
    result = runner.invoke(app, ["compare", *_tables(tmp_path), "--output", str(output)])
    assert result.exit_code == 0, result.output
    text = output.read_text(encoding="utf-8")
    assert "ANOVA Results" in text
    assert "Dataset 1 vs Dataset 2" in text


def test_anova_needs_two_tables(tmp_path):
    result = runner.invoke(app, ["anova", _tables(tmp_path)[0]])
    assert result.exit_code != 0


def test_shape_command_with_path():
    result = runner.invoke(app, ["shape", "path", "--path", "M 0 0 L 4 0 L 4 4 L 0 4 Z"])
    assert result.exit_code == 0, result.output
    assert "Area: 16.000000" in result.output
    assert "Solidity: 1.000000" in result.output


def test_shape_command_requires_dimensions():
    assert runner.invoke(app, ["shape", "rectangle", "--width", "4"]).exit_code != 0
    assert runner.invoke(app, ["shape", "path"]).exit_code != 0
    assert runner.invoke(app, ["shape", "hexagon", "--width", "1", "--height", "1"]).exit_code != 0


def test_summary_uses_configured_bins(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("stats:\n  histogram_bins: 2\n  metrics: [Area]\n", encoding="utf-8")
    result = runner.invoke(app, ["--config", str(config), "summary", *_tables(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "ctrl.csv" in result.output
    assert "treated.csv histogram" in result.output
    assert "10.0-11.0: 1" in result.output
    assert "11.0-12.0: 2" in result.output
    assert "Circularity" not in result.output
