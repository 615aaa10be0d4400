from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

from mandelbands.config import (
    DEFAULT_EXPERIMENT_NAME,
    DEFAULT_WORKERS,
    RenderConfig,
    load_named_render_configs,
    parse_bounds,
    parse_complex,
)
from mandelbands.execution import TrackingOptions, run_single_render, run_sweep
from mandelbands.imaging import ImageWriteError

USAGE = "Usage: {prog} mandelbrot.png 1920x1080 -1,1 1,-1"


class CoordinateArgumentParser(argparse.ArgumentParser):
    """Argument parser that reads ``-1,1`` or ``-0.5,0`` as positionals, not flags."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._negative_number_matcher = re.compile(r"^-\.?\d")


def build_parser():
    parser = CoordinateArgumentParser(description="Render the Mandelbrot set as a grayscale image.")
    parser.add_argument("positional", nargs="*", metavar="ARG",
                        help="OUTPUT WIDTHxHEIGHT UPPER_LEFT(RE,IM) LOWER_RIGHT(RE,IM)")
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS,
                        help="Number of bands rendered in parallel")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")

    parser.add_argument("--sweep", type=str, help="Path to YAML batch file")
    parser.add_argument("--suite", type=str, help="Name of suite within batch file")
    parser.add_argument("--list-suites", action="store_true", help="List suites in batch file")

    parser.add_argument("--track", action="store_true", help="Log renders to MLflow")
    parser.add_argument("--experiment", type=str, default=DEFAULT_EXPERIMENT_NAME,
                        help="MLflow experiment name")
    parser.add_argument("--tracking-uri", type=str, help="MLflow tracking URI")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)
    verbose = not args.quiet
    tracking = TrackingOptions(args.experiment, args.tracking_uri) if args.track else None

    # Handle batch runs
    if args.sweep:
        if args.positional:
            sys.exit("ERROR: --sweep does not take positional arguments")
        sweep_path = Path(args.sweep)

        try:
            suites = load_named_render_configs(sweep_path, args.suite)
        except (OSError, ValueError) as exc:
            sys.exit(f"ERROR: {exc}")

        if args.list_suites:
            for name, configs in suites:
                print(f"{name}: {len(configs)} configurations")
            return 0

        exit_code = 0
        for suite_name, configs in suites:
            descriptor = f"{sweep_path}::{suite_name}"
            rc = run_sweep(sweep_path, suite_name, configs, descriptor, tracking=tracking, verbose=verbose)
            exit_code = exit_code or rc
        return exit_code

    if args.suite or args.list_suites:
        sys.exit("ERROR: --suite and --list-suites require --sweep")

    # Handle direct run - exactly four positionals
    if len(args.positional) != 4:
        print(USAGE.format(prog=parser.prog), file=sys.stderr)
        return 1

    output, bounds_arg, upper_left_arg, lower_right_arg = args.positional
    bounds = parse_bounds(bounds_arg)
    if bounds is None:
        sys.exit(f"ERROR: Error while parsing bounds {bounds_arg!r}")
    upper_left = parse_complex(upper_left_arg)
    if upper_left is None:
        sys.exit(f"ERROR: Error while parsing first complex number {upper_left_arg!r}")
    lower_right = parse_complex(lower_right_arg)
    if lower_right is None:
        sys.exit(f"ERROR: Error while parsing second complex number {lower_right_arg!r}")

    try:
        config = RenderConfig(output, bounds[0], bounds[1], upper_left, lower_right, args.workers)
    except ValueError as exc:
        sys.exit(f"ERROR: {exc}")

    try:
        run_single_render(config, tracking=tracking, verbose=verbose)
    except ImageWriteError as exc:
        sys.exit(f"ERROR: Error while writing image: {exc}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
