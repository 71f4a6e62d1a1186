"""Normal-distribution helpers for comparing a measurement with a population."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

import numpy as np

from .utils.numbers import round_to


# Abramowitz & Stegun 7.1.26
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911

CURVE_SPAN_SIGMAS = 3.5


@dataclass(frozen=True)
class CurvePoint:
    x: float
    y: float


def erf(x: float) -> float:
    """Error function, max abs error ~1.5e-7. Odd by construction."""
    sign = 1.0 if x >= 0 else -1.0
    x = abs(x)
    t = 1.0 / (1.0 + _P * x)
    poly = ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t
    return sign * (1.0 - poly * math.exp(-x * x))


def normal_cdf(z: float) -> float:
    """P(Z <= z) for a standard normal Z."""
    return 0.5 * (1.0 + erf(z / math.sqrt(2.0)))


def compute_percentile(value: float, mean: float, stddev: float) -> int:
    """Percentile rank (0-100) of ``value`` in N(mean, stddev).

    A non-positive ``stddev`` carries no information, so the median is returned.
    """
    if stddev <= 0:
        return 50
    z = (value - mean) / stddev
    return int(round_to(normal_cdf(z) * 100.0, 0))


def normal_curve_points(mean: float, stddev: float, num_points: int = 100) -> List[CurvePoint]:
    """Evenly spaced density samples over mean ± 3.5 stddev, for charting."""
    if num_points < 2:
        raise ValueError("num_points must be at least 2")
    if stddev <= 0:
        raise ValueError("stddev must be positive")
    xs = np.linspace(mean - CURVE_SPAN_SIGMAS * stddev, mean + CURVE_SPAN_SIGMAS * stddev, num_points)
    ys = np.exp(-((xs - mean) ** 2) / (2.0 * stddev ** 2)) / (stddev * math.sqrt(2.0 * math.pi))
    # y is left unrounded: wide curves have tail densities below 1e-6.
    return [CurvePoint(x=round_to(float(x), 4), y=float(y)) for x, y in zip(xs, ys)]


def ordinal_suffix(n: int) -> str:
    """1 -> '1st', 11 -> '11th', 22 -> '22nd'."""
    v = n % 100
    if 11 <= v <= 13:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"
