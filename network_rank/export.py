from __future__ import annotations

import os

import pandas as pd

from .series import Series


def series_frame(series: Series, date_format: str) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": [d.strftime(date_format) for d in series.dates],
            "percentile": list(series.percentiles),
            "total": list(series.totals),
        },
        columns=["date", "percentile", "total"],
    )


def write_series_csv(series: Series, path: str, date_format: str) -> str:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    series_frame(series, date_format).to_csv(path, index=False)
    return path
