"""Parallel execution of band renders."""

from __future__ import annotations

import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .computation import allocate_image, render
from .config import RenderConfig
from .encoding import write_image
from .errors import EncodingFailure, RenderError, WorkerFailure
from .geometry import Bounds, Window
from .report import RenderReport
from .scheduling import DEFAULT_WORKERS, Band, BandPartitioner

__all__ = ["render_bands", "render_sequential", "run_single_render", "run_sweep"]


def _band_log(index: int, message: str) -> None:
    """Emit a progress message from a given band worker."""
    print(f"[Band {index}] {message}", flush=True)


def _render_band_timed(band: Band, pixels: np.ndarray, bounds: Bounds, window: Window) -> float:
    """Render one band into its exclusive view and return the elapsed time."""
    comp_start = time.perf_counter()
    render(pixels, band.bounds, band.window, top=band.top, plane=(bounds, window))
    return time.perf_counter() - comp_start


def _band_record(band: Band, comp_time: float) -> Dict[str, Any]:
    return {
        "band": band.index,
        "start_row": band.top,
        "end_row": band.bottom - 1,
        "rows": band.height,
        "imag_top": band.window.upper_left.imag,
        "imag_bottom": band.window.lower_right.imag,
        "comp_time": comp_time,
    }


def _aggregate_timing(records: List[Dict[str, Any]], total_time: float) -> Dict[str, Any]:
    comp_total = sum(record["comp_time"] for record in records)
    return {
        "wall_time": float(total_time),
        "comp_total": float(comp_total),
        "comp_max": float(max((record["comp_time"] for record in records), default=0.0)),
        "bands": len(records),
    }


def _finish(image: np.ndarray, bounds: Bounds, records: List[Dict[str, Any]], start: float) -> RenderReport:
    image.flags.writeable = False
    timing = _aggregate_timing(records, time.perf_counter() - start)
    return RenderReport(image, bounds, timing, records)


def render_bands(bounds: Bounds, window: Window, workers: int = DEFAULT_WORKERS) -> RenderReport:
    """Render ``window`` into a ``bounds`` raster with one thread per row band.

    Every band gets an exclusive slice of a single zero-filled buffer. The
    call blocks until all workers have finished; if any of them raised, a
    single ``WorkerFailure`` listing every failed band is raised instead of
    returning a partially rendered image.
    """
    start = time.perf_counter()
    partitioner = BandPartitioner(bounds, window, workers)
    bands = partitioner.bands
    image = allocate_image(bounds)

    with ThreadPoolExecutor(max_workers=len(bands), thread_name_prefix="band") as executor:
        futures = [
            (band, executor.submit(_render_band_timed, band, image[band.slice(bounds.width)], bounds, window))
            for band in bands
        ]
        wait([future for _, future in futures])

    failures: List[Tuple[int, BaseException]] = []
    records: List[Dict[str, Any]] = []
    for band, future in futures:
        error = future.exception()
        if error is not None:
            _band_log(band.index, f"FAILED: {error!r}")
            failures.append((band.index, error))
            continue
        comp_time = future.result()
        _band_log(band.index, f"Rendering rows {band.top}:{band.bottom} took {comp_time:.4f}s")
        records.append(_band_record(band, comp_time))

    if failures:
        raise WorkerFailure(failures) from failures[0][1]

    return _finish(image, bounds, records, start)


def render_sequential(bounds: Bounds, window: Window) -> RenderReport:
    """Render the whole raster as a single band on the calling thread."""
    start = time.perf_counter()
    band = BandPartitioner(bounds, window, workers=1).bands[0]
    image = allocate_image(bounds)
    comp_time = _render_band_timed(band, image, bounds, window)
    return _finish(image, bounds, [_band_record(band, comp_time)], start)


def run_single_render(config: RenderConfig, suite_name: Optional[str] = None) -> RenderReport:
    """Render one configuration, write its PNG and log the run."""
    print(
        f"[Run] Starting render '{config.run_name}' "
        f"(size={config.image_size}, workers={config.workers})",
        flush=True,
    )

    report = render_bands(config.bounds, config.window, config.workers)
    write_image(config.output, report.image, config.bounds)
    print(f"[Run] Wrote {config.output}", flush=True)

    suite = suite_name or os.environ.get("MANDELBROT_SUITE") or "default"
    if os.environ.get("SKIP_MLFLOW"):
        print("[Run] SKIP_MLFLOW set - skipping MLflow logging.", flush=True)
    else:
        from .logging import log_to_mlflow

        log_to_mlflow(config, report, suite)

    print(f"[Timing] Total: {report.timing['wall_time']:.4f}s")
    return report


def run_sweep(
    configs: List[RenderConfig],
    task_id: Optional[int] = None,
    suite_name: Optional[str] = None,
    descriptor: str = "sweep",
) -> int:
    """Render every configuration of a sweep, or only ``task_id``."""
    if not configs:
        print("ERROR: No configurations found in sweep", file=sys.stderr)
        return 1

    if task_id is not None:
        if task_id < 0 or task_id >= len(configs):
            print(f"ERROR: task-id {task_id} out of range [0, {len(configs) - 1}]", file=sys.stderr)
            return 1
        print(f"[Task {task_id}] Running: {configs[task_id].run_name}")
        return 0 if _run_guarded(configs[task_id], suite_name) else 1

    print("=" * 70)
    print(f"Running {len(configs)} configurations from {descriptor}")
    print("=" * 70)

    failures: List[Tuple[int, str]] = []
    for idx, cfg in enumerate(configs):
        print(f"\n[{idx + 1}/{len(configs)}] {cfg.run_name}")
        if not _run_guarded(cfg, suite_name):
            failures.append((idx, cfg.run_name))

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


def _run_guarded(config: RenderConfig, suite_name: Optional[str]) -> bool:
    try:
        run_single_render(config, suite_name)
    except (RenderError, EncodingFailure) as exc:
        print(f"    ✗ FAILED: {exc}", file=sys.stderr)
        return False
    return True
