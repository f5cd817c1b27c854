import numpy as np
from cached_property import cached_property

from ..probe.interfaces import CellHandle

__all__ = ['SimplexMesh']

class SimplexMesh(object):
    '''Mesh of intervals, triangles or tetrahedra, with topological
dimension equal to the geometric dimension.

Parameters
----------
vertices: array_like
    Shape :code:`(num_vertices, gdim)`. A 1D array is read as a list
    of 1D coordinates.
cells: array_like
    Shape :code:`(num_cells, gdim + 1)`, vertex indices of each cell.
'''
    def __init__(self, vertices, cells):
        vertices = np.asarray(vertices, dtype='double')
        if vertices.ndim == 1:
            vertices = vertices[:, None]
        cells = np.asarray(cells, dtype='intp')
        if vertices.ndim != 2 or not (1 <= vertices.shape[1] <= 3):
            raise ValueError("vertices must have shape (n, gdim), gdim<=3, "
                             "got {!r}".format(vertices.shape))
        if cells.ndim != 2 or cells.shape[1] != vertices.shape[1] + 1:
            raise ValueError("cells must have shape (n, {}), got {!r}".format(
                vertices.shape[1] + 1, cells.shape))
        if cells.size and (cells.min() < 0 or
                           cells.max() >= len(vertices)):
            raise ValueError("cell vertex index out of range")
        self.vertices = vertices
        self.cells = cells

    @cached_property
    def geometric_dimension(self):
        return self.vertices.shape[1]

    @property
    def num_vertices(self):
        return len(self.vertices)

    @property
    def num_cells(self):
        return len(self.cells)

    @property
    def vertices_per_cell(self):
        return self.cells.shape[1]

    @cached_property
    def cell_coordinates(self):
        ''' Shape :code:`(num_cells, gdim + 1, gdim)`. '''
        return self.vertices[self.cells]

    def cell_vertex_coordinates(self, index):
        return self.cell_coordinates[index]

    @cached_property
    def centroids(self):
        return self.cell_coordinates.mean(axis=1)

    @cached_property
    def circumradii(self):
        ''' Largest distance from each centroid to one of its vertices. '''
        d = self.cell_coordinates - self.centroids[:, None, :]
        return np.sqrt((d**2).sum(axis=2)).max(axis=1)

    @cached_property
    def jacobians(self):
        '''Shape :code:`(num_cells, gdim, gdim)`; column `k` is the edge
from vertex 0 to vertex `k+1`.'''
        c = self.cell_coordinates
        return np.swapaxes(c[:, 1:, :] - c[:, :1, :], 1, 2)

    def cell(self, index):
        return CellHandle(index, self.cell_vertex_coordinates(index))

    def __repr__(self):
        return '<{} gdim={} cells={} vertices={}>'.format(
            type(self).__name__, self.geometric_dimension,
            self.num_cells, self.num_vertices)
