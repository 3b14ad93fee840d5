"""Population statistics over float series.

All helpers return 0.0 (or an empty array) for empty input instead of
raising, so callers can feed them thin or filtered series directly.
"""

from typing import Sequence, Tuple, Union

import numpy as np

FloatSeries = Union[Sequence[float], np.ndarray]


def _as_array(values: FloatSeries) -> np.ndarray:
    return np.asarray(values, dtype=float)


def mean(values: FloatSeries) -> float:
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(np.mean(arr))


def population_variance(values: FloatSeries) -> float:
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(np.var(arr, ddof=0))


def population_std(values: FloatSeries) -> float:
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(np.std(arr, ddof=0))


def population_covariance(xs: FloatSeries, ys: FloatSeries) -> float:
    """Covariance of two equal-length series (divides by n)."""
    x = _as_array(xs)
    y = _as_array(ys)
    if x.size == 0 or x.size != y.size:
        return 0.0
    return float(np.cov(x, y, bias=True)[0, 1])


def pearson_correlation(xs: FloatSeries, ys: FloatSeries) -> float:
    """Pearson correlation; 0.0 when either series has no dispersion."""
    x = _as_array(xs)
    y = _as_array(ys)
    if x.size == 0 or x.size != y.size:
        return 0.0
    if np.std(x) <= 0 or np.std(y) <= 0:
        return 0.0
    return float(np.corrcoef(x, y)[0, 1])


def simple_returns(values: FloatSeries) -> np.ndarray:
    """Step returns (v[i] - v[i-1]) / v[i-1], skipping non-positive bases."""
    arr = _as_array(values)
    if arr.size < 2:
        return np.array([], dtype=float)
    base = arr[:-1]
    valid = base > 0
    return np.diff(arr)[valid] / base[valid]


def paired_returns(pairs: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Step returns for an (n, 2) array of value pairs, skipping steps where either base is not positive"""
    pairs = np.asarray(pairs, dtype=float).reshape(-1, 2)
    prev, curr = pairs[:-1], pairs[1:]
    valid = (prev[:, 0] > 0) & (prev[:, 1] > 0)
    returns = (curr[valid] - prev[valid]) / prev[valid]
    return returns[:, 0], returns[:, 1]


def drawdowns(values: FloatSeries) -> Tuple[float, float]:
    """Maximum and current decline from the running peak, as fractions (0 where the peak is not positive)"""
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0, 0.0
    peaks = np.maximum.accumulate(arr)
    safe_peaks = np.where(peaks > 0, peaks, 1.0)
    declines = np.where(peaks > 0, (peaks - arr) / safe_peaks, 0.0)
    return float(declines.max()), float(declines[-1])


def safe_divide(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator
