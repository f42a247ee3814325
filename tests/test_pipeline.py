import importlib.util
import json
import logging
import sys
from pathlib import Path
import numpy as np
import pytest
from oscspline.data.generate_oscillator import IntegrationParameters, simulate_oscillator

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "run_pipeline.py"

@pytest.fixture
def pipeline():
    spec = importlib.util.spec_from_file_location("run_pipeline", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    yield module
    logger = logging.getLogger("oscspline")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

def run_cli(pipeline, monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["run_pipeline.py", *args])
    pipeline.main()

@pytest.mark.parametrize("args,message", [
    (["--lam", "abc"], "field 'lam'"),
    (["--h", "-0.1"], "--h must be > 0"),
    (["--h", "0"], "--h must be > 0"),
    (["--spline_nodes", "1"], "--spline_nodes must be >= 2"),
    (["--begin", "30", "--end", "0"], "trajectory is empty"),
    (["--h", "100"], "Not enough samples"),
])
def test_cli_rejects_bad_input(pipeline, monkeypatch, capsys, tmp_path, args, message):
    with pytest.raises(SystemExit) as exc:
        run_cli(pipeline, monkeypatch, "--out", str(tmp_path / "art"), *args)
    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert err.startswith("ERROR:")
    assert message in err
    assert not (tmp_path / "art" / "summary.json").exists()

def test_cli_writes_artifacts(pipeline, monkeypatch, tmp_path):
    art = tmp_path / "art"
    run_cli(pipeline, monkeypatch, "--end", "2", "--h", "0.1", "--spline_nodes", "10", "--out", str(art))
    summary = json.loads((art / "summary.json").read_text())
    lines = (art / "Output.txt").read_text().splitlines()
    assert summary["end"] == 17.0 and summary["lambda"] == 3.0
    assert summary["samples"] == len(lines) - 1
    assert summary["spline_nodes"] == 10
    assert summary["energy_change"] < 0.0
    assert "energy_drift" not in summary
    for name in ("trajectory.png", "spline.png", "VERSIONS.txt"):
        assert (art / name).exists()
    assert not (art / "sweep.png").exists()

def test_cli_undamped_sweep_reports_drift(pipeline, monkeypatch, tmp_path):
    art = tmp_path / "art"
    log = tmp_path / "run.log"
    run_cli(pipeline, monkeypatch, "--lam", "0", "--h", "0.05", "--sweep", "--out", str(art),
            "--log_level", "DEBUG", "--log_file", str(log))
    summary = json.loads((art / "summary.json").read_text())
    assert summary["sweep"] is True
    assert summary["energy_drift"] < 1e-4
    assert (art / "sweep.png").exists()
    assert "Resampling" in log.read_text()

def test_resample_with_spline_tracks_trajectory(pipeline):
    tr = simulate_oscillator(IntegrationParameters(end=25.0))
    model, (xs, ys), rmse = pipeline.resample_with_spline(tr, 200)
    assert len(xs) == 200
    assert xs[0] == tr.times[0] and xs[-1] == tr.times[-1]
    np.testing.assert_allclose(model(xs), ys, rtol=0, atol=1e-10)
    assert rmse < 1e-3

def test_resample_with_more_nodes_than_samples(pipeline):
    tr = simulate_oscillator(IntegrationParameters(end=1.0, h=0.25))
    model, (xs, _), rmse = pipeline.resample_with_spline(tr, 50)
    assert len(xs) == len(tr) == 4
    assert rmse == pytest.approx(0.0, abs=1e-12)
