from __future__ import annotations

import argparse
import sys
from pathlib import Path

from mandelbrot.config import default_render_config, load_named_sweep_configs, parse_complex, parse_pair
from mandelbrot.errors import EncodingFailure, RenderError
from mandelbrot.execution import run_single_render, run_sweep

USAGE_EXAMPLE = "Example: main.py --workers 8 -- mandel.png 1000x750 -1.20,0.35 -1,0.20"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Render the Mandelbrot set into a grayscale PNG using parallel row bands.",
        epilog=USAGE_EXAMPLE,
    )
    parser.add_argument("file", nargs="?", help="Output PNG file")
    parser.add_argument("pixels", nargs="?", help="Image size as WIDTHxHEIGHT")
    parser.add_argument("upper_left", nargs="?", help="Upper left corner as RE,IM")
    parser.add_argument("lower_right", nargs="?", help="Lower right corner as RE,IM")
    parser.add_argument("--workers", type=int, default=8, help="Number of row bands rendered in parallel")
    parser.add_argument("--sweep", type=str, help="Path to sweep YAML file")
    parser.add_argument("--suite", type=str, help="Name of suite/experiment within sweep file")
    parser.add_argument("--list-suites", action="store_true", help="List suites in sweep file")
    parser.add_argument("--task-id", type=int, help="Run specific config index (for HPC arrays)")
    return parser, parser.parse_args(argv)


def main(argv=None):
    parser, args = parse_args(argv)

    if args.sweep:
        sweep_path = Path(args.sweep)

        if args.list_suites:
            for name, configs in load_named_sweep_configs(sweep_path):
                print(f"{name}: {len(configs)} configurations")
            return 0

        exit_code = 0
        for suite_name, configs in load_named_sweep_configs(sweep_path, args.suite):
            rc = run_sweep(configs, args.task_id, suite_name, f"{sweep_path}::{suite_name}")
            exit_code = exit_code or rc
        return exit_code

    # Handle direct CLI run - all positionals required
    if not all([args.file, args.pixels, args.upper_left, args.lower_right]):
        parser.error("FILE PIXELS UPPERLEFT LOWERRIGHT are required without --sweep")

    bounds = parse_pair(args.pixels, "x", int)
    if bounds is None:
        parser.error(f"error parsing image dimensions {args.pixels!r}")
    upper_left = parse_complex(args.upper_left)
    if upper_left is None:
        parser.error(f"error parsing upper left corner point {args.upper_left!r}")
    lower_right = parse_complex(args.lower_right)
    if lower_right is None:
        parser.error(f"error parsing lower right corner point {args.lower_right!r}")

    config = default_render_config(
        output=args.file,
        width=bounds[0],
        height=bounds[1],
        upper_left=upper_left,
        lower_right=lower_right,
        workers=args.workers,
    )

    try:
        run_single_render(config)
    except (RenderError, EncodingFailure) as exc:
        sys.exit(f"ERROR: {exc}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
