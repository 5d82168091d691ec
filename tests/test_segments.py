import math

import pytest

import linkage_graph.segments as segments_module
from linkage_graph import (
    MOTOR,
    PASSIVE,
    Config,
    ImpossibleGeometryError,
    MissingValueError,
    MotorInput,
    PassiveInput,
    SegmentOutput,
    ValidationError,
    get_segment_kind,
    register_segment_kind,
)
from linkage_graph.math_utils import _acos_checked, _law_of_cosines_arg


def _dist(a, b):
    return math.hypot(b[0] - a[0], b[1] - a[1])


def _reflect(point, a, b):
    dx, dy = b[0] - a[0], b[1] - a[1]
    t = ((point[0] - a[0]) * dx + (point[1] - a[1]) * dy) / (dx * dx + dy * dy)
    foot = (a[0] + t * dx, a[1] + t * dy)
    return 2.0 * foot[0] - point[0], 2.0 * foot[1] - point[1]


def test_motor_segment_at_45_degrees():
    p2 = MOTOR.solve(MotorInput(p0=(0.0, 0.0), p1=(1.0, 0.0), theta=math.pi / 4, len=1.0)).p2

    assert math.isclose(p2[0], 1 / math.sqrt(2), abs_tol=1e-9)
    assert math.isclose(p2[1], 1 / math.sqrt(2), abs_tol=1e-9)


def test_motor_segment_rotates_relative_to_reference_edge():
    # edge points up, so a further quarter turn points left
    p2 = MOTOR.solve(MotorInput(p0=(1.0, 1.0), p1=(1.0, 3.0), theta=math.pi / 2, len=2.0)).p2

    assert math.isclose(p2[0], -1.0, abs_tol=1e-9)
    assert math.isclose(p2[1], 1.0, abs_tol=1e-9)


@pytest.mark.parametrize('theta', [0.0, 0.4, 1.9, -2.5])
def test_motor_segment_keeps_length_and_angle(theta):
    p0, p1 = (0.3, -0.7), (2.1, 0.4)
    p2 = MOTOR.solve(MotorInput(p0=p0, p1=p1, theta=theta, len=1.75)).p2

    assert math.isclose(_dist(p0, p2), 1.75, rel_tol=1e-9)
    edge = math.atan2(p1[1] - p0[1], p1[0] - p0[0])
    arm = math.atan2(p2[1] - p0[1], p2[0] - p0[0])
    delta = math.remainder(arm - edge - theta, 2 * math.pi)
    assert math.isclose(delta, 0.0, abs_tol=1e-9)


def test_motor_segment_is_deterministic():
    inputs = MotorInput(p0=(0.0, 0.0), p1=(1.0, 2.0), theta=0.7, len=3.0)

    assert MOTOR.solve(inputs) == MOTOR.solve(inputs)


def test_passive_segment_apex():
    p2 = PASSIVE.solve(PassiveInput(p0=(0.0, 0.0), p1=(1.0, 0.0), len0=math.sqrt(2), len1=1.0)).p2

    assert math.isclose(p2[0], 1.0, abs_tol=1e-9)
    assert math.isclose(p2[1], 1.0, abs_tol=1e-9)


def test_passive_segment_other_way_by_reversing_points():
    p2 = PASSIVE.solve(PassiveInput(p0=(1.0, 0.0), p1=(0.0, 0.0), len0=1.0, len1=math.sqrt(2))).p2

    assert math.isclose(p2[0], 1.0, abs_tol=1e-9)
    assert math.isclose(p2[1], -1.0, abs_tol=1e-9)


def test_passive_segment_satisfies_both_link_lengths():
    p0, p1 = (0.5, -0.2), (2.0, 1.1)
    p2 = PASSIVE.solve(PassiveInput(p0=p0, p1=p1, len0=1.5, len1=1.2)).p2

    assert math.isclose(_dist(p0, p2), 1.5, rel_tol=1e-9)
    assert math.isclose(_dist(p1, p2), 1.2, rel_tol=1e-9)


def test_passive_segment_swap_gives_mirror_apex():
    p0, p1 = (0.5, -0.2), (2.0, 1.1)
    apex = PASSIVE.solve(PassiveInput(p0=p0, p1=p1, len0=1.5, len1=1.2)).p2
    swapped = PASSIVE.solve(PassiveInput(p0=p1, p1=p0, len0=1.2, len1=1.5)).p2

    mirrored = _reflect(apex, p0, p1)
    assert math.isclose(swapped[0], mirrored[0], abs_tol=1e-9)
    assert math.isclose(swapped[1], mirrored[1], abs_tol=1e-9)
    assert not math.isclose(swapped[1], apex[1], abs_tol=1e-6)


def test_passive_segment_fully_stretched_triangle():
    p2 = PASSIVE.solve(PassiveInput(p0=(0.0, 0.0), p1=(2.0, 0.0), len0=1.0, len1=1.0)).p2

    assert math.isclose(p2[0], 1.0, abs_tol=1e-9)
    assert math.isclose(p2[1], 0.0, abs_tol=1e-9)


def test_passive_segment_tolerates_cosine_round_off():
    # len1 a hair short of the stretched length pushes the cosine just past 1
    len1 = 1.0 - 2e-12
    assert _law_of_cosines_arg(len1, 1.0, 2.0) > 1.0

    p2 = PASSIVE.solve(PassiveInput(p0=(0.0, 0.0), p1=(2.0, 0.0), len0=1.0, len1=len1)).p2

    assert math.isclose(p2[0], 1.0, abs_tol=1e-9)
    assert math.isclose(p2[1], 0.0, abs_tol=1e-9)


def test_acos_checked_clamps_only_round_off():
    assert _acos_checked(1.0 + 1e-12) == 0.0
    assert _acos_checked(-1.0 - 1e-12) == math.pi

    with pytest.raises(ValueError):
        _acos_checked(1.01)


def test_passive_segment_rejects_unreachable_triangle():
    with pytest.raises(ImpossibleGeometryError) as exc:
        PASSIVE.solve(PassiveInput(p0=(0.0, 0.0), p1=(10.0, 0.0), len0=1.0, len1=1.0))

    assert exc.value.cosine is not None
    assert exc.value.cosine > 1.0


def test_passive_segment_rejects_coincident_base():
    with pytest.raises(ImpossibleGeometryError):
        PASSIVE.solve(PassiveInput(p0=(1.0, 1.0), p1=(1.0, 1.0), len0=1.0, len1=1.0))


def test_passive_segment_unchecked_propagates_nan():
    p2 = PASSIVE.solve(
        PassiveInput(p0=(0.0, 0.0), p1=(10.0, 0.0), len0=1.0, len1=1.0), check_geometry=False
    ).p2

    assert math.isnan(p2[0])
    assert math.isnan(p2[1])


def test_passive_gather_input_waits_for_points():
    config = Config(points={'a': (0.0, 0.0)}, lengths={'l0': 1.0, 'l1': 1.0})
    refs = {'p0': 'a', 'p1': 'b', 'p2': 'c', 'len0': 'l0', 'len1': 'l1'}

    assert PASSIVE.gather_input(config, refs) is None

    config.set('points', 'b', (1.0, 0.0))
    inputs = PASSIVE.gather_input(config, refs)
    assert inputs == PassiveInput(p0=(0.0, 0.0), p1=(1.0, 0.0), len0=1.0, len1=1.0)


def test_gather_input_is_strict_about_lengths_and_angles():
    config = Config(points={'a': (0.0, 0.0), 'b': (1.0, 0.0)}, lengths={'l0': 1.0})
    refs = {'p0': 'a', 'p1': 'b', 'p2': 'c', 'len': 'l0', 'theta': 'missing_theta'}

    with pytest.raises(MissingValueError) as exc:
        MOTOR.gather_input(config, refs)

    assert exc.value.ref == 'missing_theta'
    assert exc.value.namespace == 'angles'


def test_commit_and_is_ready():
    config = Config()
    refs = {'p0': 'a', 'p1': 'b', 'p2': 'c', 'len': 'l', 'theta': 't'}

    assert not MOTOR.is_ready(config, refs)
    MOTOR.commit(config, refs, SegmentOutput(p2=(3.0, 4.0)))
    assert MOTOR.is_ready(config, refs)
    assert config.point('c') == (3.0, 4.0)


def test_short_tags_alias_builtin_kinds():
    assert get_segment_kind('m') is MOTOR
    assert get_segment_kind('p') is PASSIVE
    assert get_segment_kind('motor') is MOTOR


def test_unknown_kind_raises_validation_error():
    with pytest.raises(ValidationError):
        get_segment_kind('slider')


def test_register_rejects_conflicting_tag(monkeypatch):
    monkeypatch.setattr(segments_module, '_REGISTRY', dict(segments_module._REGISTRY))

    with pytest.raises(ValueError):
        register_segment_kind(segments_module.PassiveSegment(), 'm')


def test_custom_kind_resolves_through_the_driver(monkeypatch):
    from linkage_graph import Linkage, SegmentSpec, forward_linkage, segment_kinds

    monkeypatch.setattr(segments_module, '_REGISTRY', dict(segments_module._REGISTRY))

    class MidpointSegment(segments_module.MotorSegment):
        tag = 'midpoint'
        input_roles = ('p0', 'p1')

        def gather_input(self, config, refs):
            return self._base_points(config, refs)

        def solve(self, inputs, *, check_geometry=True):
            (x0, y0), (x1, y1) = inputs
            return SegmentOutput(p2=((x0 + x1) / 2, (y0 + y1) / 2))

    kind = register_segment_kind(MidpointSegment())
    assert segment_kinds()['midpoint'] is kind

    linkage = Linkage(
        static_points={'a': (0.0, 0.0), 'b': (2.0, 4.0)},
        segments=[SegmentSpec('midpoint', {'p0': 'a', 'p1': 'b', 'p2': 'm'})],
    )
    assert forward_linkage(linkage, {}).points['m'] == (1.0, 2.0)
