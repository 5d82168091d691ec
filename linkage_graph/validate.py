from typing import Dict, Mapping

from .model import Linkage, SegmentSpec
from .segments import get_segment_kind
from .types import ValidationError, is_finite_number


def _check_roles(idx: int, seg: SegmentSpec) -> None:
    try:
        kind = get_segment_kind(seg.kind)
    except ValidationError as exc:
        raise ValidationError(f'[segment {idx}] {exc}') from exc
    expected = set(kind.input_roles) | set(kind.output_roles)
    given = set(seg.refs)
    missing = sorted(expected - given)
    if missing:
        raise ValidationError(f'[segment {idx}] {seg.kind} segment missing roles {missing}')
    extra = sorted(given - expected)
    if extra:
        raise ValidationError(f'[segment {idx}] {seg.kind} segment has unknown roles {extra}')
    for role, ref in seg.refs.items():
        if not isinstance(ref, str) or not ref:
            raise ValidationError(f'[segment {idx}] role {role} must name a reference, got {ref!r}')
    inputs = {seg.refs[role] for role in kind.input_roles}
    for role in kind.output_roles:
        if seg.refs[role] in inputs:
            raise ValidationError(f'[segment {idx}] output {role}={seg.refs[role]} is also one of its inputs')


def _check_producers(linkage: Linkage) -> None:
    # every computed point has exactly one producer and is never an anchor
    producers: Dict[str, int] = {}
    for idx, seg in enumerate(linkage.segments):
        for role in get_segment_kind(seg.kind).output_roles:
            ref = seg.refs[role]
            if ref in linkage.static_points:
                raise ValidationError(f'[segment {idx}] output {role}={ref} is a static point')
            if ref in producers:
                raise ValidationError(
                    f'[segment {idx}] output {role}={ref} is already produced by segment {producers[ref]}'
                )
            producers[ref] = idx


def _check_static_points(points: Mapping[str, object]) -> None:
    for ref, value in points.items():
        if isinstance(value, str) or not hasattr(value, '__len__') or len(value) != 2:
            raise ValidationError(f'static point {ref} must be an (x, y) pair, got {value!r}')
        if not all(is_finite_number(v) for v in value):
            raise ValidationError(f'static point {ref} has non-finite coordinates {value!r}')


def validate_angles(angles: Mapping[str, object]) -> None:
    for ref, value in angles.items():
        if not is_finite_number(value):
            raise ValidationError(f'angle {ref} must be a finite number, got {value!r}')


def validate(linkage: Linkage) -> None:
    _check_static_points(linkage.static_points)
    for ref, value in linkage.lengths.items():
        if not is_finite_number(value):
            raise ValidationError(f'length {ref} must be a finite number, got {value!r}')
    for idx, seg in enumerate(linkage.segments):
        _check_roles(idx, seg)
    _check_producers(linkage)
