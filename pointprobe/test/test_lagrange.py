import numpy as np

import pytest

from ..fem import LagrangeSpace, NodalFunction
from ..mesh import make_unit_square_mesh, make_unit_cube_mesh
from ..probe import Probe, value_size


def test_space_descriptor():
    mesh = make_unit_cube_mesh(1, 1, 1)
    V = LagrangeSpace(mesh, value_shape=(3, 3))
    assert V.geometric_dimension == 3
    assert V.rank == 2
    assert value_size(V) == 9
    assert V.local_dof_count == 36

    S = LagrangeSpace(mesh)
    assert S.rank == 0
    assert S.value_size == 1
    assert S.local_dof_count == 4

    with pytest.raises(ValueError):
        LagrangeSpace(mesh, degree=2)


def test_basis_blocks():
    V = LagrangeSpace(make_unit_square_mesh(1, 1), value_shape=(2,))
    cell = V.mesh.cell(0)
    x = cell.vertex_coordinates.mean(axis=0)
    # dof 4 is node 1 of component 1
    assert V.basis.basis_value(4, x, cell) == pytest.approx([0.0, 1/3])
    g = V.basis.basis_gradient(4, x, cell)
    assert len(g) == 4
    assert g[:2] == pytest.approx([0.0, 0.0])


def test_gradients_sum_to_zero():
    V = LagrangeSpace(make_unit_cube_mesh(1, 1, 1))
    cell = V.mesh.cell(3)
    x = cell.vertex_coordinates.mean(axis=0)
    G = V.basis.scalar_gradients(x, cell)
    assert G.shape == (4, 3)
    assert G.sum(axis=0) == pytest.approx([0.0, 0.0, 0.0], abs=1e-12)


def test_cellwise_constant():
    mesh = make_unit_square_mesh(2, 2)
    V = LagrangeSpace(mesh, degree=0)
    f = NodalFunction(V, np.arange(mesh.num_cells, dtype=float))
    p = Probe((0.9, 0.1), V)
    assert p.basis_weights.tolist() == [[1.0]]
    p.evaluate_with_gradient(f)
    assert p.component_and_snapshot(0, 0) == p.cell.index
    assert p.gradient_snapshot(0) == pytest.approx([0.0, 0.0])


def test_restrict_order():
    V = LagrangeSpace(make_unit_square_mesh(1, 1), value_shape=(2,))
    f = V.function(np.arange(8.0).reshape((4, 2)))
    cell = V.mesh.cell(1)
    nodes = V.mesh.cells[1]
    c = V.restrictor.restrict(f, cell)
    assert list(c) == [2.0*n for n in nodes] + [2.0*n + 1 for n in nodes]


def test_restrict_wrong_space():
    mesh = make_unit_square_mesh(1, 1)
    V = LagrangeSpace(mesh)
    W = LagrangeSpace(mesh)
    with pytest.raises(TypeError):
        V.restrictor.restrict(W.function(), mesh.cell(0))
    with pytest.raises(TypeError):
        V.restrictor.restrict(np.zeros(4), mesh.cell(0))


def test_interpolate():
    V = LagrangeSpace(make_unit_square_mesh(2, 2))
    f = V.function().interpolate(lambda x: 3*x[0] - x[1])
    assert f.values.shape == (9, 1)
    assert f.values[-1, 0] == pytest.approx(2.0)
