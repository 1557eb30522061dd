"""Derive the chart configuration from user options and the parsed data.

derive_plot_config() is pure apart from the display check it is handed, so the
same (options, year span, display answer) always yields the same configuration.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .errors import ConfigurationConflict
from .series import YearSpan


TITLE = "Neoturbine.NET Network Rating"
Y_LABEL = "Percentile"
X_LABEL = "Date"
Y2_LABEL = "Number Of Networks"
PRIMARY_LABEL = "IRC Ranking"
TOTALS_LABEL = "Total # of IRC Networks"

DEFAULT_PNG = "network-rank.png"
DEFAULT_SVG = "network-rank.svg"
DEFAULT_SOURCE = "network-rank"


class Smoothing(Enum):
    CSPLINES = "csplines"
    BEZIER = "bezier"


class TimestampPrecision(Enum):
    DATE = "date"
    DATETIME = "datetime"


class OutputKind(Enum):
    INTERACTIVE = "interactive"
    TEXT = "text"
    PNG = "png"
    SVG = "svg"


# (input key format, tick format when the year is uniform, tick format when it varies)
_DATE_FORMATS = {
    TimestampPrecision.DATE: ("%Y-%m-%d", "%m/%d", "%m/%d/%Y"),
    TimestampPrecision.DATETIME: ("%Y-%m-%d %H:%M:%S", "%m/%d %H:%M", "%m/%d/%Y %H:%M"),
}


@dataclass
class Options:
    show_totals: bool = False
    png: Optional[str] = None
    svg: Optional[str] = None
    source: str = DEFAULT_SOURCE
    smoothing: Optional[Smoothing] = Smoothing.CSPLINES
    timestamp_precision: TimestampPrecision = TimestampPrecision.DATE
    strict: bool = False
    csv: Optional[str] = None
    timeout: float = 30.0
    retries: int = 1


@dataclass(frozen=True)
class OutputTarget:
    kind: OutputKind
    path: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.kind in (OutputKind.PNG, OutputKind.SVG)


@dataclass(frozen=True)
class PlotConfiguration:
    title: str
    y_label: str
    x_label: str
    date_input_format: str
    date_output_format: str
    smoothing: Optional[Smoothing]
    show_totals: bool
    secondary_axis_label: Optional[str]
    output_target: OutputTarget
    legend_position: str = "upper left"
    primary_label: Optional[str] = None
    totals_label: Optional[str] = None


DisplayProbe = Callable[[], bool]


def detect_display() -> bool:
    forced = (os.environ.get("NETWORK_RANK_DISPLAY") or "").strip()
    if forced in ("0", "1"):
        return forced == "1"
    if sys.platform.startswith("win") or sys.platform == "darwin":
        return True
    return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))


def validate_options(options: Options) -> None:
    if options.png and options.svg:
        raise ConfigurationConflict("PNG and SVG output are mutually exclusive; pick one")


def _output_target(options: Options, display_available: DisplayProbe) -> OutputTarget:
    if options.png:
        return OutputTarget(OutputKind.PNG, options.png)
    if options.svg:
        return OutputTarget(OutputKind.SVG, options.svg)
    if display_available():
        return OutputTarget(OutputKind.INTERACTIVE)
    return OutputTarget(OutputKind.TEXT)


def derive_plot_config(
    options: Options,
    year_span: YearSpan,
    display_available: DisplayProbe = detect_display,
) -> PlotConfiguration:
    validate_options(options)

    key_fmt, uniform_fmt, varies_fmt = _DATE_FORMATS[options.timestamp_precision]
    # ticks must carry the year once the data crosses a year boundary
    tick_fmt = varies_fmt if year_span is YearSpan.VARIES else uniform_fmt

    return PlotConfiguration(
        title=TITLE,
        y_label=Y_LABEL,
        x_label=X_LABEL,
        date_input_format=key_fmt,
        date_output_format=tick_fmt,
        smoothing=options.smoothing,
        show_totals=options.show_totals,
        secondary_axis_label=Y2_LABEL if options.show_totals else None,
        output_target=_output_target(options, display_available),
        primary_label=PRIMARY_LABEL if options.show_totals else None,
        totals_label=TOTALS_LABEL if options.show_totals else None,
    )
