import logging

import numpy as np
from cached_property import cached_property
from scipy.spatial import cKDTree

from ..probe.errors import DimensionMismatch
from ..probe.interfaces import PointLocator
from ..util import SetattrInitMixin

__all__ = ['SimplexPointLocator', 'barycentric_coordinates']

def barycentric_coordinates(vertex_coordinates, point):
    '''Barycentric coordinates of `point` in the simplex with vertices
`vertex_coordinates` (shape :code:`(gdim + 1, gdim)`).'''
    v = np.asarray(vertex_coordinates, dtype='double')
    J = (v[1:] - v[0]).T
    lam = np.linalg.solve(J, np.asarray(point, dtype='double') - v[0])
    return np.concatenate(([1.0 - lam.sum()], lam))

class SimplexPointLocator(PointLocator, SetattrInitMixin):
    '''Find the cell of a :py:class:`.simplex.SimplexMesh` containing a
point.

Candidate cells come from a KD-tree over the cell centroids: a cell
can only contain the point if its centroid is within the largest
centroid-vertex distance of the mesh. Among candidates, the lowest
numbered cell whose barycentric coordinates are all at least
``-tolerance`` is returned, so points on shared facets always map to
the same cell.

Parameters
----------
mesh: :py:class:`.simplex.SimplexMesh`
tolerance: float, optional
    Slack on the barycentric inside test. (default: 1e-12)
'''
    _required_attrs = ('mesh',)
    tolerance = 1e-12

    @cached_property
    def tree(self):
        return cKDTree(self.mesh.centroids)

    @cached_property
    def search_radius(self):
        # barycentric coordinates >= -tol keep the point within
        # (1 + 2*(d+1)*tol) radii of the centroid
        r = self.mesh.circumradii
        if not len(r):
            return 0.0
        slack = 2*(self.mesh.geometric_dimension + 1)*self.tolerance
        return float(r.max()) * (1.0 + slack + 1e-9)

    def candidates(self, point):
        return sorted(self.tree.query_ball_point(point, self.search_radius))

    def contains(self, cell_index, point):
        lam = barycentric_coordinates(
            self.mesh.cell_vertex_coordinates(cell_index), point)
        return bool(np.all(lam >= -self.tolerance))

    def locate(self, point):
        mesh = self.mesh
        point = np.asarray(point, dtype='double').ravel()
        if len(point) != mesh.geometric_dimension:
            raise DimensionMismatch(
                "point {!r} is not {}-dimensional".format(
                    point.tolist(), mesh.geometric_dimension))
        if not mesh.num_cells:
            return None
        for index in self.candidates(point):
            if self.contains(index, point):
                logging.getLogger('probe.locator').debug(
                    "point %r in cell %d", point.tolist(), index)
                return mesh.cell(index)
        logging.getLogger('probe.locator').debug(
            "point %r outside mesh", point.tolist())
        return None
