"""MLflow tracking for band renders."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import mlflow
import pandas as pd
from matplotlib import pyplot as plt

from .config import DEFAULT_EXPERIMENT_NAME, RenderConfig
from .report import RenderReport


def track_render(
    config: RenderConfig,
    report: RenderReport,
    suite_name: str = "default",
    *,
    experiment_name: str = DEFAULT_EXPERIMENT_NAME,
    tracking_uri: Optional[str] = None,
) -> str:
    """Log a finished render to MLflow and return the run id.

    Args:
        config: Render configuration
        report: Buffer, timing stats and band table of the render
        suite_name: Batch suite the render belongs to, stored as a tag
        experiment_name: MLflow experiment receiving the run
        tracking_uri: Tracking server; MLflow's default store when omitted
    """
    if tracking_uri:
        mlflow.set_tracking_uri(tracking_uri)
    mlflow.set_experiment(experiment_name)

    with mlflow.start_run(run_name=config.run_name) as run:
        mlflow.set_tags({"suite": suite_name})
        mlflow.log_params(config.to_dict())

        band_records = report.copy_bands()
        if band_records:
            mlflow.log_table(_records_to_table(band_records), "bands.json")

        for key in ("wall_time", "comp_total", "total_bands"):
            mlflow.log_metric(key, float(report.timing.get(key, 0.0)))

        fig, ax = plt.subplots(figsize=(6, 6))
        ax.imshow(report.image, cmap="gray", vmin=0, vmax=255)
        ax.set_axis_off()
        mlflow.log_figure(fig, "figures/mandelbrot.png")
        plt.close(fig)

        print(f"[MLflow] Logged run: {config.run_name} (suite: {suite_name})")
        print(f"[MLflow] Run ID: {run.info.run_id}")
        return run.info.run_id


def _records_to_table(band_records: Sequence[Dict[str, Any]]) -> Dict[str, List[Any]]:
    """Convert row-wise band records into MLflow table format."""

    frame = pd.DataFrame.from_records(band_records)
    return frame.to_dict(orient="list")
