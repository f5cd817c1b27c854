import numpy as np
from cached_property import cached_property

from ..mesh import SimplexPointLocator
from ..probe.interfaces import (
    InterpolationSpace, BasisEvaluator, FieldRestrictor)

__all__ = [
    'LagrangeSpace',
    'LagrangeBasis',
    'NodalRestrictor',
    'NodalFunction']

class LagrangeSpace(InterpolationSpace):
    '''Continuous piecewise linear (`degree=1`) or cellwise constant
(`degree=0`) Lagrange space on a :py:class:`~..mesh.SimplexMesh`.

Local degrees of freedom are numbered component-major, i.e. local dof
:code:`component*nodes_per_cell + node`, where the nodes of a cell are
its vertices (degree 1) or the cell itself (degree 0).

Parameters
----------
mesh: :py:class:`~..mesh.SimplexMesh`
degree: int, optional
    0 or 1. (default: 1)
value_shape: tuple, optional
    Shape of the values; :code:`()` for scalars, :code:`(gdim,)` for
    vectors. (default: :code:`()`)
locator: :py:class:`~..probe.interfaces.PointLocator`, optional
    By default a :py:class:`~..mesh.SimplexPointLocator` on `mesh`.
'''
    def __init__(self, mesh, degree=1, value_shape=(), locator=None):
        if degree not in (0, 1):
            raise ValueError("unsupported degree {!r}".format(degree))
        self.mesh = mesh
        self.degree = degree
        self.value_shape = tuple(int(n) for n in value_shape)
        if locator is not None:
            self.locator = locator

    @property
    def geometric_dimension(self):
        return self.mesh.geometric_dimension

    @property
    def rank(self):
        return len(self.value_shape)

    def dimension(self, axis):
        return self.value_shape[axis]

    @property
    def nodes_per_cell(self):
        return self.mesh.vertices_per_cell if self.degree else 1

    @property
    def local_dof_count(self):
        return self.nodes_per_cell * self.value_size

    @property
    def num_nodes(self):
        return self.mesh.num_vertices if self.degree else self.mesh.num_cells

    @cached_property
    def node_coordinates(self):
        return self.mesh.vertices if self.degree else self.mesh.centroids

    def cell_nodes(self, cell_index):
        if self.degree:
            return self.mesh.cells[cell_index]
        return np.array([cell_index])

    @cached_property
    def locator(self):
        return SimplexPointLocator(mesh=self.mesh)

    @cached_property
    def basis(self):
        return LagrangeBasis(self)

    @cached_property
    def restrictor(self):
        return NodalRestrictor(self)

    def function(self, values=None):
        return NodalFunction(self, values)

    def __repr__(self):
        return '<{} P{} {!r} on {!r}>'.format(
            type(self).__name__, self.degree, self.value_shape, self.mesh)

class LagrangeBasis(BasisEvaluator):
    '''Vector/tensor components are blocked copies of the scalar basis:
local dof `i` only has a non-zero value in component
:code:`i // nodes_per_cell`.'''

    def __init__(self, space):
        self.space = space

    def _split(self, dof_index):
        return divmod(dof_index, self.space.nodes_per_cell)

    def scalar_values(self, point, cell):
        if not self.space.degree:
            return np.ones(1)
        v = cell.vertex_coordinates
        lam = np.linalg.solve((v[1:] - v[0]).T,
                              np.asarray(point, dtype='double') - v[0])
        return np.concatenate(([1.0 - lam.sum()], lam))

    def scalar_gradients(self, point, cell):
        ''' Shape :code:`(nodes_per_cell, gdim)`. '''
        gdim = self.space.geometric_dimension
        if not self.space.degree:
            return np.zeros((1, gdim))
        v = cell.vertex_coordinates
        Jinv = np.linalg.inv((v[1:] - v[0]).T)
        return np.vstack((-Jinv.sum(axis=0), Jinv))

    def basis_value(self, dof_index, point, cell):
        component, node = self._split(dof_index)
        r = np.zeros(self.space.value_size)
        r[component] = self.scalar_values(point, cell)[node]
        return r

    def basis_gradient(self, dof_index, point, cell):
        component, node = self._split(dof_index)
        gdim = self.space.geometric_dimension
        r = np.zeros((self.space.value_size, gdim))
        r[component] = self.scalar_gradients(point, cell)[node]
        return r.ravel()

class NodalRestrictor(FieldRestrictor):
    def __init__(self, space):
        self.space = space

    def restrict(self, field, cell):
        if getattr(field, 'space', None) is not self.space:
            raise TypeError(
                "field {!r} is not defined on {!r}".format(field, self.space))
        return field.values[self.space.cell_nodes(cell.index)].T.ravel()

class NodalFunction(object):
    '''Field given by its coefficients at the nodes of a
:py:class:`LagrangeSpace`.

Attributes
----------
values: numpy.ndarray
    Shape :code:`(num_nodes, value_size)`.
'''
    def __init__(self, space, values=None):
        self.space = space
        shape = (space.num_nodes, space.value_size)
        if values is None:
            values = np.zeros(shape)
        else:
            values = np.array(values, dtype='double').reshape(shape)
        self.values = values

    def interpolate(self, func):
        '''Set the coefficients from ``func(x)``, evaluated at every node
coordinate `x`. Returns self.'''
        self.values[:] = [np.ravel(func(x))
                          for x in self.space.node_coordinates]
        return self

    def copy(self):
        return NodalFunction(self.space, self.values)

    def __mul__(self, factor):
        return NodalFunction(self.space, self.values * factor)

    __rmul__ = __mul__
