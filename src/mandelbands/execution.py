"""Execution helpers for the command line workflows."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import RenderConfig, load_render_configs
from .imaging import write_image
from .report import RenderReport
from .threads import render


@dataclass(frozen=True)
class TrackingOptions:
    """Where to send MLflow runs; ``None`` in place of this disables tracking."""

    experiment_name: str
    tracking_uri: Optional[str] = None


def run_single_render(
    config: RenderConfig,
    suite_name: Optional[str] = None,
    *,
    tracking: Optional[TrackingOptions] = None,
    verbose: bool = True,
) -> RenderReport:
    """Render ``config``, write its image and optionally track it.

    Exceptions from the render propagate before anything is written.
    """
    if verbose:
        print(
            f"[Run] Starting render '{config.run_name}' "
            f"(bounds={config.image_size}, workers={config.workers})",
            flush=True,
        )

    report = render(config, verbose=verbose)
    path = write_image(config.output, report.pixels, report.bounds)

    if verbose:
        print(f"[Run] Wrote {path}", flush=True)
        print(f"[Timing] Total: {report.timing['wall_time']:.4f}s")

    if tracking is not None:
        from .tracking import track_render

        track_render(
            config,
            report,
            suite_name or "default",
            experiment_name=tracking.experiment_name,
            tracking_uri=tracking.tracking_uri,
        )

    return report


def run_sweep(
    config_path: str | Path | None,
    suite_name: Optional[str] = None,
    configs: Optional[list[RenderConfig]] = None,
    descriptor: Optional[str] = None,
    *,
    tracking: Optional[TrackingOptions] = None,
    verbose: bool = True,
) -> int:
    """Render every configuration of a YAML batch file or a pre-loaded list."""
    if configs is None:
        if config_path is None:
            raise ValueError("config_path must be provided when configs is None")
        configs = load_render_configs(config_path)
        descriptor = descriptor or str(config_path)
    else:
        descriptor = descriptor or (str(config_path) if config_path else "sweep")

    if not configs:
        print("ERROR: No configurations found in sweep", file=sys.stderr)
        return 1

    print("=" * 70)
    print(f"[Sweep] Rendering {len(configs)} configurations from {descriptor}")
    print("=" * 70)

    failures: list[tuple[int, str]] = []

    for idx, cfg in enumerate(configs):
        print(f"\n[{idx + 1}/{len(configs)}] {cfg.run_name}")
        try:
            run_single_render(cfg, suite_name, tracking=tracking, verbose=verbose)
        except Exception as exc:
            print(f"    ✗ FAILED: {exc}", file=sys.stderr)
            failures.append((idx, cfg.run_name))
        else:
            print("    ✓ Completed")

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    print(f"Total:      {len(configs)}")
    print(f"Successful: {len(configs) - len(failures)}")
    print(f"Failed:     {len(failures)}")

    if failures:
        print("\nFailed configurations:")
        for idx, name in failures:
            print(f"  [{idx}] {name}")
        return 1

    return 0
