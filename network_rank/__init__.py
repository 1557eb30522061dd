"""Percentile-rank charts from network ranking logs."""

from .errors import (
    ConfigurationConflict,
    MalformedRecord,
    NetworkRankError,
    RenderError,
    StreamUnavailable,
    UnpairedRecord,
)
from .plot_config import (
    Options,
    OutputKind,
    OutputTarget,
    PlotConfiguration,
    Smoothing,
    TimestampPrecision,
    derive_plot_config,
    validate_options,
)
from .records import SampleRecord, TimestampRecord, classify_line
from .render import render
from .series import Series, SeriesBuilder, YearSpan, build_series

__version__ = "0.1.0"
