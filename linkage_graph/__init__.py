from .types import (
    Point,
    Reference,
    LinkageError,
    MissingValueError,
    UnresolvedSegmentsError,
    ImpossibleGeometryError,
    ValidationError,
    as_point,
)
from .config import Config, get_required
from .segments import (
    SegmentKind,
    MotorSegment,
    PassiveSegment,
    MotorInput,
    PassiveInput,
    SegmentOutput,
    MOTOR,
    PASSIVE,
    register_segment_kind,
    get_segment_kind,
    segment_kinds,
)
from .model import Linkage, SegmentSpec
from .options import ForwardOptions, get_forward_options, set_forward_options
from .validate import validate, validate_angles
from .engine import (
    StepOutcome,
    SweepReport,
    ForwardResult,
    forward_segment,
    forward_config,
    forward_linkage,
    solve_linkage,
    forward_linkage_frames,
)

__all__ = [
    'Point',
    'Reference',
    'LinkageError',
    'MissingValueError',
    'UnresolvedSegmentsError',
    'ImpossibleGeometryError',
    'ValidationError',
    'as_point',
    'Config',
    'get_required',
    'SegmentKind',
    'MotorSegment',
    'PassiveSegment',
    'MotorInput',
    'PassiveInput',
    'SegmentOutput',
    'MOTOR',
    'PASSIVE',
    'register_segment_kind',
    'get_segment_kind',
    'segment_kinds',
    'Linkage',
    'SegmentSpec',
    'ForwardOptions',
    'get_forward_options',
    'set_forward_options',
    'validate',
    'validate_angles',
    'StepOutcome',
    'SweepReport',
    'ForwardResult',
    'forward_segment',
    'forward_config',
    'forward_linkage',
    'solve_linkage',
    'forward_linkage_frames',
]
