"""MLflow logging for Mandelbrot band renders."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Sequence

import mlflow
import pandas as pd
from matplotlib import pyplot as plt

from .config import RenderConfig
from .report import RenderReport

DEFAULT_TRACKING_URI = "file:./mlruns"
EXPERIMENT_NAME = "mandelbrot_bands"


def log_to_mlflow(
    config: RenderConfig,
    report: RenderReport,
    suite_name: str = "default",
) -> None:
    """Log a finished render to MLflow with the image and per-band timings.

    Args:
        config: Render configuration
        report: Combined outputs (image, timing stats, band table)
        suite_name: Name of the sweep suite for tagging/filtering
    """
    if os.environ.get("SKIP_MLFLOW"):
        return

    mlflow.set_tracking_uri(_resolve_tracking_uri())
    mlflow.set_experiment(os.environ.get("MLFLOW_EXPERIMENT_NAME") or EXPERIMENT_NAME)

    with mlflow.start_run(run_name=config.run_name) as run:
        mlflow.set_tags({"node_name": os.uname().nodename, "suite": suite_name})

        band_records = report.copy_bands()
        if band_records:
            mlflow.log_table(_records_to_table(band_records), "bands.json")

        mlflow.log_params(config.to_dict())

        for key, value in _metrics(report.timing).items():
            mlflow.log_metric(key, value)

        fig, ax = plt.subplots(figsize=(6, 6))
        ax.imshow(report.as_rows(), cmap="gray", vmin=0, vmax=255)
        ax.set_axis_off()
        mlflow.log_figure(fig, "figures/mandelbrot.png")
        plt.close(fig)

        print(f"[MLflow] Logged run: {config.run_name} (suite: {suite_name})")
        print(f"[MLflow] Run ID: {run.info.run_id}")


def _metrics(timing: Dict[str, Any]) -> Dict[str, float]:
    return {
        "wall_time": float(timing.get("wall_time", 0.0)),
        "comp_total": float(timing.get("comp_total", 0.0)),
        "comp_max": float(timing.get("comp_max", 0.0)),
        "bands": float(timing.get("bands", 0)),
    }


def _records_to_table(band_records: Sequence[Dict[str, Any]]) -> Dict[str, List[Any]]:
    """Convert row-wise band records into MLflow table format."""

    frame = pd.DataFrame.from_records(band_records)
    return frame.to_dict(orient="list")


def _resolve_tracking_uri() -> str:
    """Resolve tracking URI."""
    return os.environ.get("MLFLOW_TRACKING_URI") or DEFAULT_TRACKING_URI
