"""network-rank: chart a network's ranking log over time.

Reads a log (local file or http(s) URI) holding lines like

  Mon, 05 Jan 2009 13:45:02
  12 out of 1,234

and plots the upper percentile of the rank over time, optionally with the total
number of networks on a secondary axis.

Output goes to the display when one is available, to a plain-text chart in the
terminal otherwise, or to a PNG/SVG file with -p / -g.

Recognized environment variables (all optional):
  NETWORK_RANK_DATA     : default for --data
  NETWORK_RANK_TIMEOUT  : default for --timeout (seconds)
  NETWORK_RANK_RETRIES  : default for --retries
  NETWORK_RANK_DISPLAY  : 1/0 forces display detection on/off

Exit codes: 0 ok (an empty chart included), 1 bad arguments, 2 input/render failure.
"""

from __future__ import annotations

import argparse
import os
import sys
from contextlib import closing
from typing import List, Optional

from .errors import (
    ConfigurationConflict,
    MalformedRecord,
    RenderError,
    StreamUnavailable,
    UnpairedRecord,
)
from .export import write_series_csv
from .plot_config import (
    DEFAULT_PNG,
    DEFAULT_SOURCE,
    DEFAULT_SVG,
    Options,
    Smoothing,
    TimestampPrecision,
    derive_plot_config,
    validate_options,
)
from .render import render
from .series import SeriesBuilder
from .source import open_lines


TAG = "[network_rank]"


def get_env(name: str) -> Optional[str]:
    v = os.environ.get(name)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _env_float(name: str, default: float) -> float:
    v = get_env(name)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        print(f"{TAG}[WARN] ignoring {name}={v!r} (not a number)", file=sys.stderr)
        return default


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    ap = _Parser(
        prog="network-rank",
        description=(
            "Generates a graph of the data found in the 'network-rank' log. "
            "Shows it on the display (or as text in the terminal) unless -p or -g is given."
        ),
    )
    ap.add_argument(
        "-t",
        "--totals",
        action="store_true",
        help="Display total number of networks on a secondary axis.",
    )
    ap.add_argument(
        "-p",
        "--png",
        nargs="?",
        const=DEFAULT_PNG,
        default=None,
        metavar="FILE",
        help=f"Output as PNG file (defaults to {DEFAULT_PNG}).",
    )
    ap.add_argument(
        "-g",
        "--svg",
        nargs="?",
        const=DEFAULT_SVG,
        default=None,
        metavar="FILE",
        help=f"Output as SVG file (defaults to {DEFAULT_SVG}).",
    )
    ap.add_argument(
        "-d",
        "--data",
        default=get_env("NETWORK_RANK_DATA") or DEFAULT_SOURCE,
        metavar="FILE|URI",
        help="Use FILE or an http(s) URI instead of ./network-rank as input.",
    )
    ap.add_argument(
        "-c",
        "--curve",
        choices=["csplines", "bezier", "none"],
        default="csplines",
        help="Smoothing method (csplines, bezier, or none). Defaults to csplines.",
    )
    ap.add_argument(
        "--precision",
        choices=["date", "datetime"],
        default="date",
        help="Plot timestamps per day (default) or to the second.",
    )
    ap.add_argument(
        "--strict",
        action="store_true",
        help="Fail on the first malformed record instead of skipping it.",
    )
    ap.add_argument("--csv", default=None, metavar="FILE", help="Also write the parsed series to FILE.")
    ap.add_argument(
        "--timeout",
        type=float,
        default=_env_float("NETWORK_RANK_TIMEOUT", 30.0),
        help="HTTP timeout in seconds (default: 30).",
    )
    ap.add_argument(
        "--retries",
        type=int,
        default=int(_env_float("NETWORK_RANK_RETRIES", 1)),
        help="HTTP attempts before giving up (default: 1).",
    )
    return ap


def options_from_args(args: argparse.Namespace) -> Options:
    return Options(
        show_totals=args.totals,
        png=args.png,
        svg=args.svg,
        source=args.data,
        smoothing=None if args.curve == "none" else Smoothing(args.curve),
        timestamp_precision=TimestampPrecision(args.precision),
        strict=args.strict,
        csv=args.csv,
        timeout=args.timeout,
        retries=args.retries,
    )


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    options = options_from_args(args)

    try:
        validate_options(options)
    except ConfigurationConflict as e:
        print(f"{TAG}[ERROR] {e}", file=sys.stderr)
        ap.print_usage(sys.stderr)
        return 1

    builder = SeriesBuilder(strict=options.strict)
    try:
        lines = open_lines(options.source, timeout=options.timeout, retries=options.retries)
        with closing(lines):
            for line in lines:
                builder.feed(line)
        series, year_span = builder.finish()
    except (StreamUnavailable, UnpairedRecord, MalformedRecord) as e:
        print(f"{TAG}[ERROR] {e}", file=sys.stderr)
        return 2

    print(
        f"{TAG} parsed {len(series)} samples from {options.source} "
        f"(malformed skipped={builder.malformed}, partners dropped={builder.dropped}, "
        f"years={year_span.value})"
    )

    config = derive_plot_config(options, year_span)

    if options.csv:
        try:
            path = write_series_csv(series, options.csv, config.date_input_format)
        except OSError as e:
            print(f"{TAG}[ERROR] cannot write {options.csv}: {e}", file=sys.stderr)
            return 2
        print(f"{TAG} Wrote: {path}")

    try:
        render(series, config)
    except RenderError as e:
        print(f"{TAG}[ERROR] {e}", file=sys.stderr)
        return 2

    if config.output_target.is_file:
        print(f"{TAG} Wrote: {config.output_target.path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
