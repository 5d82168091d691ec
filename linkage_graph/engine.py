"""Fixed-point resolution of a linkage's segment graph.

Segments are not required to be topologically sorted: the driver sweeps the
whole list repeatedly, resolving whatever has become computable, until a sweep
makes no progress. That is ``O(n)`` segment evaluations for a sorted list and
``O(n^2)`` in the worst case, which is immaterial for linkages of tens of
segments.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .config import Config
from .logging_utils import debug_log_call
from .model import Linkage, SegmentSpec
from .options import ForwardOptions, resolve_options
from .segments import Refs, SegmentKind, get_segment_kind
from .types import (
    ImpossibleGeometryError,
    LinkageError,
    Point,
    Reference,
    UnresolvedSegmentsError,
    as_point,
)
from .validate import validate, validate_angles

logger = logging.getLogger(__name__)


class StepOutcome(enum.Enum):
    COMPUTED = "computed"
    ALREADY_COMPUTED = "already-computed"
    NOT_READY = "not-ready"

    @property
    def resolved(self) -> bool:
        return self is not StepOutcome.NOT_READY


@dataclass
class SweepReport:
    """Bookkeeping from one driver run."""

    total: int
    sweeps: int = 0
    computed: int = 0
    resolved: List[int] = field(default_factory=list)


@dataclass
class ForwardResult:
    success: bool
    config: Optional[Config] = None
    report: Optional[SweepReport] = None
    error: Optional[LinkageError] = None


def forward_segment(
    config: Config, kind: SegmentKind, refs: Refs, *, check_geometry: bool = True
) -> StepOutcome:
    """Try to compute one segment, committing its output into ``config``."""

    if kind.is_ready(config, refs):
        return StepOutcome.ALREADY_COMPUTED
    inputs = kind.gather_input(config, refs)
    if inputs is None:
        return StepOutcome.NOT_READY
    kind.commit(config, refs, kind.solve(inputs, check_geometry=check_geometry))
    return StepOutcome.COMPUTED


@debug_log_call(logger)
def forward_config(
    config: Config,
    segments: Sequence[SegmentSpec],
    options: Optional[ForwardOptions] = None,
) -> SweepReport:
    """Resolve every segment into ``config``.

    Raises :class:`MissingValueError` when a length or angle was never seeded,
    :class:`ImpossibleGeometryError` when a passive segment cannot close, and
    :class:`UnresolvedSegmentsError` when a sweep makes no progress while
    segments remain.
    """

    opts = resolve_options(options)
    kinds = [get_segment_kind(seg.kind) for seg in segments]
    report = SweepReport(total=len(segments))
    limit = opts.max_sweeps if opts.max_sweeps is not None else len(segments) + 1
    unresolved = list(range(len(segments)))

    while unresolved and report.sweeps < limit:
        report.sweeps += 1
        pending: List[int] = []
        for idx in unresolved:
            seg = segments[idx]
            try:
                outcome = forward_segment(config, kinds[idx], seg.refs, check_geometry=opts.check_geometry)
            except ImpossibleGeometryError as exc:
                raise ImpossibleGeometryError(
                    f"[segment {idx}] {seg.describe()}: {exc}",
                    cosine=exc.cosine,
                    segment_index=idx,
                ) from exc
            if not outcome.resolved:
                pending.append(idx)
                continue
            report.resolved.append(idx)
            if outcome is StepOutcome.COMPUTED:
                report.computed += 1
            logger.debug("Sweep %d: segment %d %s -> %s", report.sweeps, idx, seg.describe(), outcome.value)
        stalled = len(pending) == len(unresolved)
        unresolved = pending
        if stalled:
            break

    if unresolved:
        logger.warning("Stalled after %d sweep(s) with %d unresolved segment(s)", report.sweeps, len(unresolved))
        raise UnresolvedSegmentsError([(idx, segments[idx]) for idx in unresolved], len(segments))

    logger.debug(
        "Resolved %d segment(s) in %d sweep(s), %d computed", len(report.resolved), report.sweeps, report.computed
    )
    return report


def _seed_config(linkage: Linkage, angles: Mapping[Reference, float]) -> Config:
    return Config(
        points={ref: as_point(pt) for ref, pt in linkage.static_points.items()},
        lengths={ref: float(value) for ref, value in linkage.lengths.items()},
        angles={ref: float(value) for ref, value in angles.items()},
    )


def _run(
    linkage: Linkage, angles: Mapping[Reference, float], opts: ForwardOptions
) -> Tuple[Config, SweepReport]:
    if opts.validate:
        validate(linkage)
    validate_angles(angles)
    config = _seed_config(linkage, angles)
    report = forward_config(config, linkage.segments, opts)
    logger.info(
        "Resolved linkage with %d segment(s) in %d sweep(s): %d point(s)",
        report.total,
        report.sweeps,
        len(config.points),
    )
    return config, report


@debug_log_call(logger)
def forward_linkage(
    linkage: Linkage,
    angles: Mapping[Reference, float],
    options: Optional[ForwardOptions] = None,
) -> Config:
    """Seed a fresh store from ``linkage`` and ``angles`` and resolve every joint."""

    config, _ = _run(linkage, angles, resolve_options(options))
    return config


def solve_linkage(
    linkage: Linkage,
    angles: Mapping[Reference, float],
    options: Optional[ForwardOptions] = None,
) -> ForwardResult:
    """Like :func:`forward_linkage` but reports failures in the result instead of raising."""

    try:
        config, report = _run(linkage, angles, resolve_options(options))
    except LinkageError as exc:
        logger.info("Linkage resolution failed: %s", exc)
        return ForwardResult(success=False, error=exc)
    return ForwardResult(success=True, config=config, report=report)


@debug_log_call(logger)
def forward_linkage_frames(
    linkage: Linkage,
    frames: Iterable[Mapping[Reference, float]],
    options: Optional[ForwardOptions] = None,
) -> Dict[Reference, np.ndarray]:
    """Resolve ``linkage`` once per angle mapping in ``frames``.

    Returns each point's trajectory as an ``(n_frames, 2)`` array.
    """

    opts = resolve_options(options)
    if opts.validate:
        validate(linkage)
    frame_opts = replace(opts, validate=False)

    trajectories: Dict[Reference, List[Point]] = {}
    count = 0
    for count, angles in enumerate(frames, start=1):
        try:
            config, _ = _run(linkage, angles, frame_opts)
        except LinkageError as exc:
            logger.error("Frame %d failed: %s", count - 1, exc)
            raise
        for ref, pt in config.points.items():
            trajectories.setdefault(ref, []).append(pt)

    logger.info("Resolved %d frame(s) for %d point(s)", count, len(trajectories))
    return {ref: np.asarray(pts, dtype=float).reshape(-1, 2) for ref, pts in trajectories.items()}


__all__ = [
    "StepOutcome",
    "SweepReport",
    "ForwardResult",
    "forward_segment",
    "forward_config",
    "forward_linkage",
    "solve_linkage",
    "forward_linkage_frames",
]
