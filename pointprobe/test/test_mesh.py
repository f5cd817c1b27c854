import numpy as np

import pytest

from ..mesh import (
    SimplexMesh, SimplexPointLocator, barycentric_coordinates,
    make_1d_mesh_from_points, make_rectangle_mesh,
    make_unit_square_mesh, make_unit_cube_mesh)
from ..probe import DimensionMismatch


def total_volume(mesh):
    from math import factorial
    d = mesh.geometric_dimension
    return np.abs(np.linalg.det(mesh.jacobians)).sum() / factorial(d)


@pytest.mark.parametrize("mesh,ncells,nverts", [
    (make_1d_mesh_from_points([0.0, 0.25, 1.0]), 2, 3),
    (make_unit_square_mesh(3, 2), 12, 12),
    (make_unit_cube_mesh(2, 1, 1), 12, 12)])
def test_construction(mesh, ncells, nverts):
    assert mesh.num_cells == ncells
    assert mesh.num_vertices == nverts
    assert total_volume(mesh) == pytest.approx(1.0)


def test_rectangle_mesh_orientation():
    mesh = make_rectangle_mesh([0.0, 2.0], [0.0, 1.0])
    assert mesh.cells.tolist() == [[0, 2, 3], [0, 3, 1]]
    assert total_volume(mesh) == pytest.approx(2.0)


def test_malformed():
    with pytest.raises(ValueError):
        SimplexMesh([[0.0, 0.0], [1.0, 0.0]], [[0, 1]])
    with pytest.raises(ValueError):
        SimplexMesh([[0.0], [1.0]], [[0, 2]])
    with pytest.raises(ValueError):
        make_1d_mesh_from_points([0.0])


def test_barycentric():
    v = [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]
    assert barycentric_coordinates(v, [0.25, 0.5]) == pytest.approx(
        [0.25, 0.25, 0.5])


def test_locate():
    mesh = make_unit_square_mesh(2, 2)
    loc = SimplexPointLocator(mesh=mesh)
    cell = loc.locate([0.2, 0.1])
    assert cell is not None
    assert np.all(barycentric_coordinates(
        cell.vertex_coordinates, [0.2, 0.1]) >= 0)

    assert loc.locate([1.2, 0.1]) is None
    with pytest.raises(DimensionMismatch):
        loc.locate([0.2])


def test_locate_shared_facet_lowest_cell():
    mesh = make_unit_square_mesh(1, 1)
    loc = SimplexPointLocator(mesh=mesh)
    # on the diagonal, shared by both triangles
    assert loc.locate([0.5, 0.5]).index == 0


def test_tolerance():
    mesh = make_1d_mesh_from_points([0.0, 1.0])
    assert SimplexPointLocator(mesh=mesh).locate([1.0 + 1e-9]) is None
    loose = SimplexPointLocator(mesh=mesh, tolerance=1e-6)
    assert loose.locate([1.0 + 1e-9]).index == 0


def test_locator_requires_mesh():
    with pytest.raises(TypeError):
        SimplexPointLocator(tolerance=1e-3)


def test_locate_every_centroid():
    mesh = make_unit_cube_mesh(2, 2, 2)
    loc = SimplexPointLocator(mesh=mesh)
    for i, c in enumerate(mesh.centroids):
        assert loc.locate(c).index == i
