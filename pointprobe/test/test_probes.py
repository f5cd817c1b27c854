import numpy as np

import pytest

from ..fem import LagrangeSpace
from ..mesh import make_unit_square_mesh
from ..probe import (
    Probes, StatisticsProbes, ProbeError, IndexOutOfRange,
    DimensionMismatch)


@pytest.fixture
def space():
    return LagrangeSpace(make_unit_square_mesh(5, 5))

@pytest.fixture
def field(space):
    return space.function().interpolate(lambda x: x[0] + x[1])

POINTS = [[0.1, 0.2], [1.5, 0.5], [0.7, 0.9]]


def test_local_probes(space, caplog):
    with caplog.at_level('DEBUG', logger='probe'):
        ps = Probes(POINTS, space)
    assert len(ps) == 2
    assert ps.total_number_of_probes == 3
    assert ps.global_indices == [0, 2]
    assert ps.value_size == 1
    assert "skipping probe 1" in caplog.text

    with pytest.raises(IndexOutOfRange):
        ps.get_probe(1)
    assert list(ps.get_probe(2).coordinates()) == [0.7, 0.9, 0.0]
    assert ps.coordinates().shape == (2, 3)


def test_flat_points(space):
    ps = Probes(np.array(POINTS).ravel(), space)
    assert ps.global_indices == [0, 2]
    with pytest.raises(DimensionMismatch):
        Probes([0.1, 0.2, 0.3], space)


def test_add_positions(space):
    ps = Probes(POINTS, space)
    ps.add_positions([[0.5, 0.5], [-1.0, 0.0]], space)
    assert ps.global_indices == [0, 2, 3]
    assert ps.total_number_of_probes == 5
    assert [i for i, p in ps] == [0, 2, 3]


def test_add_positions_after_evaluation(space, field):
    ps = Probes(POINTS, space)
    ps.evaluate(field)
    with pytest.raises(ProbeError):
        ps.add_positions([[0.5, 0.5]], space)
    assert ps.global_indices == [0, 2]
    assert ps.total_number_of_probes == 3

    ps.clear()
    ps.evaluate_with_gradient(field)
    ps.clear()
    assert ps.number_of_gradient_evaluations == 1
    with pytest.raises(ProbeError):
        ps.add_positions([[0.5, 0.5]], space)

    ps.clear_gradient()
    ps.add_positions([[0.5, 0.5]], space)
    ps.evaluate(field)
    assert ps.array(component=0).shape == (3, 1)


def test_array_shapes(space, field):
    ps = Probes(POINTS, space)
    ps(field)
    ps.evaluate(2*field)
    assert ps.number_of_evaluations == 2

    assert ps.array().shape == (2, 1, 2)
    assert ps.array(snapshot=1).shape == (2, 1)
    assert ps.array(component=0).shape == (2, 2)
    assert ps.array(1, 0) == pytest.approx([0.6, 3.2])
    assert ps.array(component=0)[1] == pytest.approx([1.6, 3.2])


def test_gradient_array(space, field):
    ps = Probes(POINTS, space)
    ps.evaluate(field)
    ps.evaluate_with_gradient(field)
    assert ps.number_of_evaluations == 2
    assert ps.number_of_gradient_evaluations == 1
    assert ps.gradient_array().shape == (2, 2, 1)
    assert ps.gradient_array(snapshot=0) == pytest.approx(np.ones((2, 2)))

    ps.clear_gradient()
    assert ps.number_of_gradient_evaluations == 0
    assert ps.number_of_evaluations == 2


def test_erase_clear_restart(space, field):
    ps = Probes(POINTS, space)
    for k in range(3):
        ps.evaluate((k + 1)*field)
    ps.erase_snapshot(0)
    assert ps.array(component=0)[0] == pytest.approx([0.6, 0.9])

    ps.clear()
    assert ps.number_of_evaluations == 0

    ps.restart([[1.0], [2.0]])
    assert ps.array(snapshot=0, component=0) == pytest.approx([1.0, 2.0])
    with pytest.raises(DimensionMismatch):
        ps.restart([[1.0]])


@pytest.mark.parametrize('index', [-1, 2, 5])
def test_erase_out_of_range_keeps_series(space, field, index):
    ps = Probes(POINTS, space)
    ps.evaluate(field)
    ps.evaluate(2*field)
    before = ps.array()
    with pytest.raises(IndexOutOfRange):
        ps.erase_snapshot(index)
    assert ps.number_of_evaluations == 2
    assert ps.array() == pytest.approx(before)


def test_empty_collection(space, field):
    ps = Probes([[2.0, 2.0]], space)
    assert len(ps) == 0
    ps.evaluate(field)
    assert ps.number_of_evaluations == 0
    assert ps.array().shape == (0, 0, 0)
    assert ps.array(snapshot=0, component=0).shape == (0,)
    assert ps.coordinates().shape == (0, 3)
    assert ps.to_dataframe().empty
    with pytest.warns(RuntimeWarning):
        ps.restart(np.zeros((0, 1)))


def test_dump(space, field, tmp_path):
    ps = Probes(POINTS, space)
    ps.evaluate(field)
    path = tmp_path / "probes.txt"
    text = ps.dump(path)
    assert path.read_text() == text
    assert "Probe id = 0" in text
    assert "Probe id = 2" in text
    assert "Probe id = 1" not in text


def test_to_dataframe():
    space = LagrangeSpace(make_unit_square_mesh(2, 2), value_shape=(2,))
    f = space.function().interpolate(lambda x: (x[0], 10*x[1]))
    ps = Probes(POINTS, space)
    ps.evaluate(f)
    ps.evaluate(f*2)

    df = ps.to_dataframe()
    assert list(df.columns) == [
        'probe', 'snapshot', 'component', 'x', 'y', 'z', 'value']
    assert len(df) == 2*2*2
    row = df[(df.probe == 2) & (df.snapshot == 1) & (df.component == 1)]
    assert row.value.iloc[0] == pytest.approx(18.0)
    assert list(df.probe) == [0]*4 + [2]*4
    assert list(df.snapshot[:4]) == [0, 0, 1, 1]


def test_statistics_probes(space, field):
    ps = StatisticsProbes(POINTS, space)
    ps.evaluate(field)
    ps.evaluate(3*field)
    assert ps.array() == pytest.approx(np.array([[0.6], [3.2]]))
    assert ps.array(component=0) == pytest.approx([0.6, 3.2])
    for name in ('evaluate_with_gradient', 'gradient_array',
                 'clear_gradient', 'erase_snapshot', 'to_dataframe',
                 'number_of_gradient_evaluations'):
        assert not hasattr(ps, name)

    ps.restart([[1.0, 1.0], [4.0, 16.0]], 2)
    assert ps.array(component=0) == pytest.approx([0.5, 2.0])


@pytest.mark.parametrize('component', [-1, 1])
def test_statistics_component_range(space, field, component):
    ps = StatisticsProbes(POINTS, space)
    ps.evaluate(field)
    assert ps.value_size == 1
    with pytest.raises(IndexOutOfRange):
        ps.array(component=component)
