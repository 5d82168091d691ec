"""Segment kinds: the geometric rules that place one joint from others.

Every kind follows the same four-step contract used by the driver:

* ``is_ready`` reports whether the segment's output is already in the store,
* ``gather_input`` reads the inputs, returning ``None`` while a point input
  has not been computed yet (lengths and angles are looked up strictly),
* ``solve`` performs the pure geometric computation,
* ``commit`` writes the output back into the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Protocol, Tuple, TypeVar

from .config import Config
from .math_utils import (
    _DENOM_EPS,
    _acos_checked,
    _triangle_angle_unchecked,
    _heading2,
    _law_of_cosines_arg,
    _norm2,
    _polar_offset,
    _vec2,
)
from .types import ImpossibleGeometryError, Point, Reference, ValidationError

logger = logging.getLogger(__name__)

Refs = Mapping[str, Reference]
In = TypeVar("In")
Out = TypeVar("Out")


@dataclass(frozen=True)
class MotorInput:
    p0: Point
    p1: Point
    theta: float
    len: float


@dataclass(frozen=True)
class PassiveInput:
    p0: Point
    p1: Point
    len0: float
    len1: float


@dataclass(frozen=True)
class SegmentOutput:
    p2: Point


class SegmentKind(Protocol[In, Out]):
    tag: str
    input_roles: Tuple[str, ...]
    output_roles: Tuple[str, ...]

    def is_ready(self, config: Config, refs: Refs) -> bool:
        ...

    def gather_input(self, config: Config, refs: Refs) -> Optional[In]:
        ...

    def solve(self, inputs: In, *, check_geometry: bool = True) -> Out:
        ...

    def commit(self, config: Config, refs: Refs, output: Out) -> None:
        ...


class _ApexSegment:
    """Shared bookkeeping for kinds that place a single point ``p2``."""

    output_roles: Tuple[str, ...] = ("p2",)

    def is_ready(self, config: Config, refs: Refs) -> bool:
        return config.has("points", refs["p2"])

    def commit(self, config: Config, refs: Refs, output: SegmentOutput) -> None:
        config.set("points", refs["p2"], output.p2)

    @staticmethod
    def _base_points(config: Config, refs: Refs) -> Optional[Tuple[Point, Point]]:
        p0 = config.get("points", refs["p0"])
        p1 = config.get("points", refs["p1"])
        if p0 is None or p1 is None:
            # computed by another segment that has not run yet
            return None
        return p0, p1  # type: ignore[return-value]


class MotorSegment(_ApexSegment):
    """Joint driven at angle ``theta`` from the ``p0 -> p1`` edge, ``len`` away from ``p0``."""

    tag = "motor"
    input_roles: Tuple[str, ...] = ("p0", "p1", "theta", "len")

    def gather_input(self, config: Config, refs: Refs) -> Optional[MotorInput]:
        base = self._base_points(config, refs)
        if base is None:
            return None
        p0, p1 = base
        return MotorInput(
            p0=p0,
            p1=p1,
            theta=config.angle(refs["theta"]),
            len=config.length(refs["len"]),
        )

    def solve(self, inputs: MotorInput, *, check_geometry: bool = True) -> SegmentOutput:
        alpha = _heading2(inputs.p0, inputs.p1)
        return SegmentOutput(p2=_polar_offset(inputs.p0, inputs.len, alpha + inputs.theta))


class PassiveSegment(_ApexSegment):
    """Apex of the triangle with base ``p0 - p1`` and sides ``len0`` (at p0), ``len1`` (at p1).

    The apex is taken counter-clockwise from the ``p0 -> p1`` direction; the
    mirrored solution is obtained by swapping ``p0``/``p1`` (and the lengths).
    """

    tag = "passive"
    input_roles: Tuple[str, ...] = ("p0", "p1", "len0", "len1")

    def gather_input(self, config: Config, refs: Refs) -> Optional[PassiveInput]:
        base = self._base_points(config, refs)
        if base is None:
            return None
        p0, p1 = base
        return PassiveInput(
            p0=p0,
            p1=p1,
            len0=config.length(refs["len0"]),
            len1=config.length(refs["len1"]),
        )

    def solve(self, inputs: PassiveInput, *, check_geometry: bool = True) -> SegmentOutput:
        len2 = _norm2(_vec2(inputs.p0, inputs.p1))
        alpha = _heading2(inputs.p0, inputs.p1)
        if check_geometry:
            theta = self._interior_angle(inputs, len2)
        else:
            theta = _triangle_angle_unchecked(inputs.len1, inputs.len0, len2)
        return SegmentOutput(p2=_polar_offset(inputs.p0, inputs.len0, alpha + theta))

    @staticmethod
    def _interior_angle(inputs: PassiveInput, len2: float) -> float:
        if len2 <= _DENOM_EPS:
            raise ImpossibleGeometryError("base points coincide; triangle is undefined")
        if abs(inputs.len0) <= _DENOM_EPS:
            raise ImpossibleGeometryError("link len0 is zero; triangle is undefined")
        cosine = _law_of_cosines_arg(inputs.len1, inputs.len0, len2)
        try:
            return _acos_checked(cosine)
        except ValueError as exc:
            raise ImpossibleGeometryError(
                f"lengths len0={inputs.len0:.6g}, len1={inputs.len1:.6g} cannot span base {len2:.6g} "
                f"(cosine={cosine:.6g})",
                cosine=cosine,
            ) from exc


_REGISTRY: Dict[str, SegmentKind] = {}


def register_segment_kind(kind: SegmentKind, *aliases: str) -> SegmentKind:
    """Make ``kind`` available under its tag and any ``aliases``."""

    for name in (kind.tag, *aliases):
        existing = _REGISTRY.get(name)
        if existing is not None and existing is not kind:
            raise ValueError(f"segment kind tag {name!r} already registered to {type(existing).__name__}")
        _REGISTRY[name] = kind
    logger.debug("Registered segment kind %s (aliases=%s)", kind.tag, aliases)
    return kind


def get_segment_kind(tag: str) -> SegmentKind:
    try:
        return _REGISTRY[tag]
    except KeyError as exc:
        raise ValidationError(f"unknown segment kind {tag!r}; known: {sorted(_REGISTRY)}") from exc


def segment_kinds() -> Dict[str, SegmentKind]:
    return dict(_REGISTRY)


MOTOR = register_segment_kind(MotorSegment(), "m")
PASSIVE = register_segment_kind(PassiveSegment(), "p")


__all__ = [
    "Refs",
    "MotorInput",
    "PassiveInput",
    "SegmentOutput",
    "SegmentKind",
    "MotorSegment",
    "PassiveSegment",
    "MOTOR",
    "PASSIVE",
    "register_segment_kind",
    "get_segment_kind",
    "segment_kinds",
]
