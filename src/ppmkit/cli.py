from __future__ import annotations

import argparse
import logging
import sys
import unittest
from pathlib import Path
from typing import List

from . import __version__
from .core import PpmKitError, load_image, process_single_image, run_demo
from .formatting import format_grid
from .ops import EditOptions, apply_edits


def _edit_options_from_args(ns: argparse.Namespace) -> EditOptions:
    return EditOptions(
        grayscale=ns.grayscale,
        brightness=ns.brightness or 0,
        contrast=ns.contrast,
        blur=ns.blur,
        flip_h=ns.flip_h,
        flip_v=ns.flip_v,
        rotate=ns.rotate,
    )


def _add_common_edit_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--grayscale", action="store_true", help="convert to a single gray plane")
    p.add_argument("--brightness", type=int, metavar="N", help="add N to every sample (may be negative)")
    p.add_argument("--contrast", type=float, metavar="F", help="scale samples around 128 by F")
    p.add_argument("--blur", action="store_true", help="3x3 mean blur (border pixels become 0)")
    p.add_argument("--flip-h", action="store_true", help="horizontal flip")
    p.add_argument("--flip-v", action="store_true", help="vertical flip")
    p.add_argument("--rotate", type=int, choices=[90, 180, 270], help="rotate clockwise")


def _add_common_io_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--out-dir", type=Path, help="output directory (defaults next to input)")
    p.add_argument("--png", action="store_true", help="also write a PNG preview next to each .ppm")
    p.add_argument("--verbose", action="store_true", help="verbose logging")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
    )


def run_selftest() -> int:
    loader = unittest.TestLoader()
    suite = loader.discover(start_dir=str(Path(__file__).parent.parent.parent / "tests"))
    runner = unittest.TextTestRunner(verbosity=2)
    res = runner.run(suite)
    return 0 if res.wasSuccessful() else 1


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ppmkit",
        description="Apply grayscale, flip, rotate, brightness, contrast and blur to plain-text (P3) PPM images.",
    )
    ap.add_argument("--selftest", action="store_true", help="run the internal test suite and exit")
    ap.add_argument("--version", action="version", version=f"ppmkit {__version__}")

    sub = ap.add_subparsers(dest="cmd", required=False)

    # convert
    p_conv = sub.add_parser("convert", help="apply edits to one P3 image and write <stem>_<suffix>.ppm")
    p_conv.add_argument("input", type=Path, metavar="input.ppm")
    p_conv.add_argument("--suffix", type=str, default="out", help="output name suffix (default: out)")
    _add_common_io_flags(p_conv)
    _add_common_edit_flags(p_conv)

    # show
    p_show = sub.add_parser("show", help="print pixel values of a (small) P3 image")
    p_show.add_argument("input", type=Path, metavar="input.ppm")
    _add_common_edit_flags(p_show)

    # demo
    p_demo = sub.add_parser("demo", help="write the 4x4 test image and every transform of it")
    p_demo.add_argument("--brightness", type=int, default=50, metavar="N", help="brightness delta (default: 50)")
    p_demo.add_argument("--contrast", type=float, default=1.5, metavar="F", help="contrast factor (default: 1.5)")
    p_demo.add_argument("--print", dest="print_grids", action="store_true", help="print each result")
    _add_common_io_flags(p_demo)

    return ap


def main(argv: List[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    ap = build_parser()
    ns = ap.parse_args(argv)

    if ns.selftest and ns.cmd is None:
        sys.exit(run_selftest())

    if ns.cmd == "convert":
        _setup_logging(ns.verbose)
        edits = _edit_options_from_args(ns)
        try:
            process_single_image(
                input_path=ns.input,
                out_dir=ns.out_dir,
                edits=edits,
                suffix=ns.suffix,
                png=ns.png,
            )
        except PpmKitError as e:
            print(str(e), file=sys.stderr)
            sys.exit(2)
        return

    if ns.cmd == "show":
        edits = _edit_options_from_args(ns)
        try:
            grid = apply_edits(load_image(ns.input), edits)
        except PpmKitError as e:
            print(str(e), file=sys.stderr)
            sys.exit(2)
        except ValueError as e:
            print(f"{ns.input.name}: {e}", file=sys.stderr)
            sys.exit(2)
        print(format_grid(grid))
        return

    if ns.cmd == "demo":
        _setup_logging(ns.verbose)
        try:
            steps = run_demo(
                out_dir=ns.out_dir or Path.cwd(),
                brightness=ns.brightness,
                contrast=ns.contrast,
                png=ns.png,
            )
        except PpmKitError as e:
            print(str(e), file=sys.stderr)
            sys.exit(2)
        if ns.print_grids:
            for step in steps:
                print(f"- {step.name}: {step.path.name}")
                print(format_grid(step.grid))
                print()
        return

    ap.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
