from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from .types import Point

_DENOM_EPS = 1e-12
_COSINE_TOL = 1e-9


def _vec2(a: Point, b: Point) -> Tuple[float, float]:
    return b[0] - a[0], b[1] - a[1]


def _norm2(v: Tuple[float, float]) -> float:
    return math.hypot(v[0], v[1])


def _heading2(a: Point, b: Point) -> float:
    dx, dy = _vec2(a, b)
    return math.atan2(dy, dx)


def _polar_offset(origin: Point, length: float, angle: float) -> Point:
    return origin[0] + length * math.cos(angle), origin[1] + length * math.sin(angle)


def _law_of_cosines_arg(opposite: float, adjacent: float, base: float) -> float:
    # cosine of the angle between ``adjacent`` and ``base``
    return (opposite * opposite - adjacent * adjacent - base * base) / (-2.0 * adjacent * base)


def _acos_checked(value: float) -> float:
    """Inverse cosine that tolerates round-off just outside ``[-1, 1]``."""

    if not (-1.0 - _COSINE_TOL <= value <= 1.0 + _COSINE_TOL):
        raise ValueError(f"cosine {value!r} outside [-1, 1]")
    return math.acos(min(1.0, max(-1.0, value)))


def _triangle_angle_unchecked(opposite: float, adjacent: float, base: float) -> float:
    """Law-of-cosines angle without domain checks; NaN for impossible triangles."""

    with np.errstate(divide="ignore", invalid="ignore"):
        cosine = (np.float64(opposite) ** 2 - np.float64(adjacent) ** 2 - np.float64(base) ** 2) / (
            -2.0 * np.float64(adjacent) * np.float64(base)
        )
        return float(np.arccos(cosine))


__all__ = [
    "_DENOM_EPS",
    "_COSINE_TOL",
    "_vec2",
    "_norm2",
    "_heading2",
    "_polar_offset",
    "_law_of_cosines_arg",
    "_acos_checked",
    "_triangle_angle_unchecked",
]
