"""Static description of a linkage: anchors, link lengths and segments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .types import Point, Reference, ValidationError, as_point

_KIND_KEYS = ("kind", "t")
_STATIC_POINT_KEYS = ("static_points", "staticPoints")


@dataclass(frozen=True)
class SegmentSpec:
    """One segment of the linkage: a kind tag plus its role -> reference wiring."""

    kind: str
    refs: Mapping[str, Reference]

    def __post_init__(self) -> None:
        object.__setattr__(self, "refs", dict(self.refs))

    def __hash__(self) -> int:
        return hash((self.kind, tuple(sorted(self.refs.items()))))

    def describe(self) -> str:
        wiring = ", ".join(f"{role}={ref}" for role, ref in self.refs.items())
        return f"{self.kind}({wiring})"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SegmentSpec":
        kind = next((data[key] for key in _KIND_KEYS if key in data), None)
        refs = data.get("refs")
        if not isinstance(kind, str) or not isinstance(refs, Mapping):
            raise ValidationError(f"segment entry needs a kind tag and a refs mapping, got {data!r}")
        return cls(kind=kind, refs=refs)

    def to_mapping(self) -> Dict[str, Any]:
        return {"kind": self.kind, "refs": dict(self.refs)}


@dataclass
class Linkage:
    """Anchor points, fixed link lengths and the (unordered) segment list."""

    static_points: Dict[Reference, Point] = field(default_factory=dict)
    lengths: Dict[Reference, float] = field(default_factory=dict)
    segments: List[SegmentSpec] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Linkage":
        """Build a linkage from plain dicts, e.g. the output of a JSON loader.

        Points may be ``{"x": .., "y": ..}`` objects or 2-sequences; segments
        use ``kind`` or ``t`` for the tag.
        """

        raw_points = next((data[key] for key in _STATIC_POINT_KEYS if key in data), {})
        points: Dict[Reference, Point] = {}
        for ref, value in raw_points.items():
            if isinstance(value, Mapping):
                value = (value.get("x"), value.get("y"))
            try:
                points[ref] = as_point(value)
            except (TypeError, ValueError) as exc:
                raise ValidationError(f"static point {ref!r}: {exc}") from exc
        lengths = dict(data.get("lengths", {}))
        segments = [SegmentSpec.from_mapping(entry) for entry in data.get("segments", [])]
        return cls(static_points=points, lengths=lengths, segments=segments)

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "static_points": {ref: list(pt) for ref, pt in self.static_points.items()},
            "lengths": dict(self.lengths),
            "segments": [seg.to_mapping() for seg in self.segments],
        }


__all__ = ["SegmentSpec", "Linkage"]
