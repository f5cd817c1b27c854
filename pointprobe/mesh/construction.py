from itertools import product

import numpy as np

from .simplex import SimplexMesh

__all__ = [
    'make_1d_mesh_from_points',
    'make_rectangle_mesh',
    'make_box_mesh',
    'make_unit_interval_mesh',
    'make_unit_square_mesh',
    'make_unit_cube_mesh']

def make_1d_mesh_from_points(Xs):
    Xs = np.asarray(Xs, dtype='double')
    N = len(Xs)
    if N < 2:
        raise ValueError("need at least two points, got {}".format(N))
    cells = np.column_stack((np.arange(N-1), np.arange(1, N)))
    return SimplexMesh(Xs[:, None], cells)

def make_rectangle_mesh(Xs, Ys):
    Xs = np.asarray(Xs, dtype='double')
    Ys = np.asarray(Ys, dtype='double')
    nX, nY = len(Xs), len(Ys)

    vertices = np.array([(x, y) for x in Xs for y in Ys])

    cells = []
    for ix in range(nX-1):
        for iy in range(nY-1):
            # ^ y
            # |   (b+1)(c+1)
            # |    |   / |
            # |    |  /  |
            # |    | /   |
            # |   (b)---(c)
            # |
            # +---------------> x
            b = ix*nY + iy
            c = b + nY
            cells.append((b, c,   c+1))
            cells.append((b, c+1, b+1))

    return SimplexMesh(vertices, np.array(cells).reshape((-1, 3)))

# Kuhn split of the unit cube: one tetrahedron per permutation of the
# axes, each walking from corner (0,0,0) to (1,1,1) one axis at a time.
_KUHN_PATHS = [
    (0, 1, 2), (0, 2, 1), (1, 0, 2), (1, 2, 0), (2, 0, 1), (2, 1, 0)]

def make_box_mesh(Xs, Ys, Zs):
    axes = [np.asarray(A, dtype='double') for A in (Xs, Ys, Zs)]
    n = [len(A) for A in axes]

    vertices = np.array(list(product(*axes)))

    def vertex_index(i, j, k):
        return (i*n[1] + j)*n[2] + k

    cells = []
    for corner in product(*(range(m-1) for m in n)):
        for path in _KUHN_PATHS:
            v = list(corner)
            tet = [vertex_index(*v)]
            for axis in path:
                v[axis] += 1
                tet.append(vertex_index(*v))
            cells.append(tet)

    return SimplexMesh(vertices, np.array(cells).reshape((-1, 4)))

def make_unit_interval_mesh(n):
    return make_1d_mesh_from_points(np.linspace(0.0, 1.0, n+1))

def make_unit_square_mesh(nx, ny):
    return make_rectangle_mesh(np.linspace(0.0, 1.0, nx+1),
                               np.linspace(0.0, 1.0, ny+1))

def make_unit_cube_mesh(nx, ny, nz):
    return make_box_mesh(np.linspace(0.0, 1.0, nx+1),
                         np.linspace(0.0, 1.0, ny+1),
                         np.linspace(0.0, 1.0, nz+1))
