from __future__ import annotations

import math
import numbers
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .model import SegmentSpec

Reference = str
Point = Tuple[float, float]

NAMESPACES: Tuple[str, ...] = ("points", "lengths", "angles")


class LinkageError(RuntimeError):
    """Base class for every failure raised while resolving a linkage."""


class MissingValueError(LinkageError, KeyError):
    """Raised when a strictly required reference is absent from the store."""

    def __init__(self, ref: object, namespace: Optional[str] = None):
        self.ref = ref
        self.namespace = namespace
        message = f"no value for key {ref}"
        if namespace is not None:
            message += f" (namespace={namespace})"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0])


class UnresolvedSegmentsError(LinkageError):
    """Raised when the driver stalls with segments still unresolved."""

    def __init__(self, unresolved: Sequence[Tuple[int, "SegmentSpec"]], total: int):
        self.unresolved: List[Tuple[int, "SegmentSpec"]] = list(unresolved)
        self.total = total
        details = "; ".join(f"[{idx}] {seg.describe()}" for idx, seg in self.unresolved)
        super().__init__(
            f"failed to compute all segments: {len(self.unresolved)} of {total} unresolved: {details}"
        )

    @property
    def indices(self) -> List[int]:
        return [idx for idx, _ in self.unresolved]


class ImpossibleGeometryError(LinkageError):
    """Raised when link lengths cannot close the requested triangle."""

    def __init__(
        self,
        message: str,
        *,
        cosine: Optional[float] = None,
        segment_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.cosine = cosine
        self.segment_index = segment_index


class ValidationError(LinkageError):
    pass


def is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def as_point(value: Any) -> Point:
    """Return ``value`` as an ``(x, y)`` float tuple."""

    try:
        size = len(value)
    except TypeError as exc:
        raise ValueError(f"point must be a 2-sequence, got {value!r}") from exc
    if size != 2:
        raise ValueError(f"point must have exactly two coordinates, got {size}")
    return float(value[0]), float(value[1])


__all__ = [
    "Reference",
    "Point",
    "NAMESPACES",
    "LinkageError",
    "MissingValueError",
    "UnresolvedSegmentsError",
    "ImpossibleGeometryError",
    "ValidationError",
    "is_finite_number",
    "as_point",
]
