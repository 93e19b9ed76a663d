"""Tests for MLflow run logging."""

import mlflow
import pytest

from mandelbrot.config import RenderConfig
from mandelbrot.execution import render_bands
from mandelbrot.logging import _metrics, _records_to_table, _resolve_tracking_uri, log_to_mlflow


@pytest.fixture
def rendered(dyadic_bounds, dyadic_window):
    config = RenderConfig("out.png", 64, 48, dyadic_window.upper_left, dyadic_window.lower_right, 3)
    return config, render_bands(dyadic_bounds, dyadic_window, 3)


def test_skip_mlflow_does_not_touch_tracking(monkeypatch, rendered):
    def fail(*args, **kwargs):
        raise AssertionError("mlflow must not be called")

    monkeypatch.setattr(mlflow, "set_tracking_uri", fail)
    monkeypatch.setattr(mlflow, "start_run", fail)
    log_to_mlflow(*rendered)


def test_logs_run_to_local_store(monkeypatch, tmp_path, rendered):
    monkeypatch.delenv("SKIP_MLFLOW")
    monkeypatch.setenv("MLFLOW_TRACKING_URI", tmp_path.joinpath("mlruns").as_uri())
    monkeypatch.setenv("MLFLOW_EXPERIMENT_NAME", "bands_test")
    config, report = rendered

    log_to_mlflow(config, report, suite_name="TESTS")

    runs = mlflow.search_runs(experiment_names=["bands_test"], output_format="list")
    assert len(runs) == 1
    run = runs[0]
    assert run.data.params["workers"] == "3"
    assert run.data.params["upper_left"] == "-2.0,1.5"
    assert run.data.metrics["bands"] == 3.0
    assert run.data.tags["suite"] == "TESTS"


def test_records_to_table():
    table = _records_to_table([{"band": 0, "comp_time": 0.5}, {"band": 1, "comp_time": 0.25}])
    assert table == {"band": [0, 1], "comp_time": [0.5, 0.25]}


def test_metrics_defaults():
    assert _metrics({}) == {"wall_time": 0.0, "comp_total": 0.0, "comp_max": 0.0, "bands": 0.0}


def test_tracking_uri(monkeypatch):
    monkeypatch.delenv("MLFLOW_TRACKING_URI", raising=False)
    assert _resolve_tracking_uri() == "file:./mlruns"
    monkeypatch.setenv("MLFLOW_TRACKING_URI", "sqlite:///runs.db")
    assert _resolve_tracking_uri() == "sqlite:///runs.db"
