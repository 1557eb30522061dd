"""Rendering adapter: hand a parsed Series and its PlotConfiguration to a backend.

Backends:
  - PNG / SVG file : matplotlib (Agg)
  - interactive    : matplotlib default GUI backend, plt.show()
  - text terminal  : plotext

Any backend failure surfaces as RenderError.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .errors import RenderError
from .plot_config import OutputKind, PlotConfiguration, Smoothing
from .series import Series
from .smoothing import bezier, natural_cubic_spline


_EPOCH = datetime(1970, 1, 1)
_TEXT_TICKS = 6


def keyed_dates(dates: Sequence[datetime], fmt: str) -> List[datetime]:
    """Round-trip dates through their key text so the plotted instant is the key."""
    return [datetime.strptime(d.strftime(fmt), fmt) for d in dates]


def smooth_curve(
    xs: Sequence[float], ys: Sequence[float], smoothing: Optional[Smoothing]
) -> Tuple[List[float], List[float]]:
    if smoothing is Smoothing.CSPLINES:
        sx, sy = natural_cubic_spline(xs, ys)
    elif smoothing is Smoothing.BEZIER:
        sx, sy = bezier(xs, ys)
    else:
        return list(xs), list(ys)
    return [float(v) for v in sx], [float(v) for v in sy]


def render(series: Series, config: PlotConfiguration) -> None:
    kind = config.output_target.kind
    try:
        if kind is OutputKind.TEXT:
            _render_text(series, config)
        else:
            _render_matplotlib(series, config)
    except RenderError:
        raise
    except Exception as e:
        raise RenderError(f"{kind.value} rendering failed: {e}") from e


def _render_matplotlib(series: Series, config: PlotConfiguration) -> None:
    import matplotlib

    target = config.output_target
    if target.is_file:
        matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig = draw_figure(series, config, plt)

    if target.is_file:
        fig.savefig(target.path, format=target.kind.value, dpi=200)
        plt.close(fig)
    else:
        plt.show()


def draw_figure(series: Series, config: PlotConfiguration, plt):
    """Build the matplotlib figure: percentile axes, plus a twin axes for totals."""
    import matplotlib.dates as mdates

    dates = keyed_dates(series.dates, config.date_input_format)
    xs = [float(v) for v in mdates.date2num(dates)] if dates else []
    ys = list(series.percentiles)

    fig, ax = plt.subplots(figsize=(8.0, 4.8))
    ax.plot(xs, ys, "o", markersize=3, color="tab:blue")
    sx, sy = smooth_curve(xs, ys, config.smoothing)
    ax.plot(sx, sy, "-", linewidth=1, color="tab:blue", label=config.primary_label)

    ax.set_title(config.title)
    ax.set_xlabel(config.x_label)
    ax.set_ylabel(config.y_label)
    ax.xaxis.set_major_formatter(mdates.DateFormatter(config.date_output_format))

    handles, labels = ax.get_legend_handles_labels()
    if config.show_totals:
        ax2 = ax.twinx()
        ax2.plot(
            xs,
            list(series.totals),
            marker="o",
            markersize=3,
            linewidth=1,
            color="tab:orange",
            label=config.totals_label,
        )
        ax2.set_ylabel(config.secondary_axis_label or "")
        h2, l2 = ax2.get_legend_handles_labels()
        handles += h2
        labels += l2
    if handles:
        ax.legend(handles, labels, loc=config.legend_position, fontsize=8)

    fig.autofmt_xdate()
    fig.tight_layout()
    return fig


def _render_text(series: Series, config: PlotConfiguration) -> None:
    import plotext as plt

    dates = keyed_dates(series.dates, config.date_input_format)
    xs = [(d - _EPOCH).total_seconds() / 86400.0 for d in dates]
    ys = list(series.percentiles)

    plt.clf()
    if xs:
        plt.scatter(xs, ys, marker="dot")
        sx, sy = smooth_curve(xs, ys, config.smoothing)
        if config.primary_label:
            plt.plot(sx, sy, label=config.primary_label)
        else:
            plt.plot(sx, sy)
        if config.show_totals:
            plt.plot(xs, list(series.totals), yside="right", marker="dot", label=config.totals_label)

        step = max(1, len(xs) // _TEXT_TICKS)
        ticks = xs[::step]
        plt.xticks(ticks, [d.strftime(config.date_output_format) for d in dates[::step]])

    plt.title(config.title)
    plt.xlabel(config.x_label)
    plt.ylabel(config.y_label)
    if config.show_totals:
        plt.ylabel(config.secondary_axis_label, yside="right")
    plt.theme("clear")
    plt.show()
