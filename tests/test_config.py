import pytest

from linkage_graph import Config, MissingValueError, get_required


def test_get_required_returns_value_when_key_exists():
    assert get_required({'a': 3}, 'a') == 3


def test_get_required_raises_when_key_missing():
    with pytest.raises(MissingValueError) as exc:
        get_required({}, 'a')

    assert str(exc.value) == 'no value for key a'
    assert exc.value.ref == 'a'


def test_missing_value_error_is_a_key_error():
    with pytest.raises(KeyError):
        get_required({}, 'a')


def test_set_then_get_and_has_observe_value():
    config = Config()
    assert not config.has('points', 'p0')
    assert config.get('points', 'p0') is None

    config.set('points', 'p0', (1.0, 2.0))

    assert config.has('points', 'p0')
    assert config.get('points', 'p0') == (1.0, 2.0)
    assert config.point('p0') == (1.0, 2.0)


def test_namespaces_are_independent():
    config = Config()
    config.set('lengths', 'x', 2.5)
    config.set('angles', 'x', 0.5)

    assert config.length('x') == 2.5
    assert config.angle('x') == 0.5
    assert not config.has('points', 'x')


def test_strict_accessors_name_namespace_and_reference():
    config = Config()

    with pytest.raises(MissingValueError) as exc:
        config.length('len7')

    assert exc.value.ref == 'len7'
    assert exc.value.namespace == 'lengths'
    assert 'len7' in str(exc.value)
    assert 'lengths' in str(exc.value)


def test_unknown_namespace_is_rejected():
    with pytest.raises(ValueError):
        Config().get('velocities', 'v0')
