"""Smoothed connecting curves for the percentile plot.

Both methods first make the data monotonic in x: points are sorted and points
sharing an x value are replaced by one point at their mean y.

  csplines : natural cubic spline through every point
  bezier   : Bezier curve using every point as a control point
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np
from scipy.interpolate import CubicSpline


DEFAULT_SAMPLES = 200


def unique_mean(xs: Sequence[float], ys: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    if x.shape != y.shape:
        raise ValueError(f"x/y length mismatch: {x.shape} vs {y.shape}")
    ux, inv = np.unique(x, return_inverse=True)
    sums = np.bincount(inv, weights=y, minlength=len(ux))
    counts = np.bincount(inv, minlength=len(ux))
    return ux, sums / counts


def natural_cubic_spline(
    xs: Sequence[float], ys: Sequence[float], samples: int = DEFAULT_SAMPLES
) -> Tuple[np.ndarray, np.ndarray]:
    x, y = unique_mean(xs, ys)
    n = len(x)
    if n < 3:
        return x, y

    spline = CubicSpline(x, y, bc_type="natural")
    sx = np.linspace(x[0], x[-1], max(samples, n))
    return sx, spline(sx)


def bezier(
    xs: Sequence[float], ys: Sequence[float], samples: int = DEFAULT_SAMPLES
) -> Tuple[np.ndarray, np.ndarray]:
    x, y = unique_mean(xs, ys)
    n = len(x)
    if n < 3:
        return x, y

    degree = n - 1
    t = np.linspace(0.0, 1.0, samples)[1:-1]
    k = np.arange(n)
    # Bernstein weights in log space; binomials overflow for long logs
    log_binom = np.array([math.lgamma(n) - math.lgamma(i + 1) - math.lgamma(n - i) for i in range(n)])
    log_w = (
        log_binom[None, :]
        + k[None, :] * np.log(t)[:, None]
        + (degree - k)[None, :] * np.log1p(-t)[:, None]
    )
    w = np.exp(log_w)
    bx = np.concatenate(([x[0]], w @ x, [x[-1]]))
    by = np.concatenate(([y[0]], w @ y, [y[-1]]))
    return bx, by
