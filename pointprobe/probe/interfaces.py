'''Narrow interfaces for the objects a probe talks to.

The probe core only ever sees these capability sets. The mesh, the
finite element basis and the field storage live elsewhere (see
:py:mod:`pointprobe.fem` and :py:mod:`pointprobe.mesh` for a small
reference implementation on simplex meshes).
'''

import abc
from functools import reduce
import operator as OP
import os

import numpy as np

__all__ = [
    'CellHandle',
    'PointLocator',
    'BasisEvaluator',
    'FieldRestrictor',
    'InterpolationSpace',
    'TextSink',
    'FileTextSink',
    'value_size']

class CellHandle(object):
    '''One cell of the locally held mesh.

Parameters
----------
index: int
    Local cell number.
vertex_coordinates: array_like
    Array of shape :code:`(num_vertices, gdim)`.
'''
    def __init__(self, index, vertex_coordinates):
        self.index = int(index)
        self.vertex_coordinates = np.array(
            vertex_coordinates, dtype='double', ndmin=2)
        self.vertex_coordinates.flags.writeable = False

    def __eq__(self, other):
        return (isinstance(other, CellHandle) and
                self.index == other.index and
                np.array_equal(self.vertex_coordinates,
                               other.vertex_coordinates))

    def __hash__(self):
        return hash(self.index)

    def __repr__(self):
        return 'CellHandle({!r})'.format(self.index)

class PointLocator(abc.ABC):
    @abc.abstractmethod
    def locate(self, point):
        '''Return the :py:class:`CellHandle` of the local cell containing
`point`, or None.'''

class BasisEvaluator(abc.ABC):
    @abc.abstractmethod
    def basis_value(self, dof_index, point, cell):
        ''' Vector of length `value_size`. '''

    @abc.abstractmethod
    def basis_gradient(self, dof_index, point, cell):
        '''Vector of length `value_size*gdim`, component-major, i.e.
entry :code:`component*gdim + direction`.'''

class FieldRestrictor(abc.ABC):
    @abc.abstractmethod
    def restrict(self, field, cell):
        ''' Local coefficients (length `local_dof_count`) of `field` on
`cell`. '''

class InterpolationSpace(abc.ABC):
    '''Descriptor of a discrete function space, together with the
collaborators bound to its mesh.

Attributes
----------
geometric_dimension: int
rank: int
    Tensor rank of the values (0 scalar, 1 vector, ...).
local_dof_count: int
    Number of degrees of freedom on one cell.
locator: :py:class:`PointLocator`
basis: :py:class:`BasisEvaluator`
restrictor: :py:class:`FieldRestrictor`
'''
    @abc.abstractmethod
    def dimension(self, axis):
        ''' Extent of the value tensor along `axis`. '''

    @property
    def value_size(self):
        return value_size(self)

def value_size(space):
    ''' Number of scalar components, the product of the extents over
the space's rank (1 for scalars). '''
    return reduce(OP.mul, (space.dimension(i) for i in range(space.rank)), 1)

class TextSink(abc.ABC):
    @abc.abstractmethod
    def write(self, text):
        pass

class FileTextSink(TextSink):
    '''Write text to `path`, overwriting it unless `append` is set.'''
    def __init__(self, path, append=False):
        self.path = path
        self.append = append

    def write(self, text):
        dirname = os.path.dirname(self.path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        with open(self.path, 'at' if self.append else 'wt',
                  encoding='utf-8') as h:
            h.write(text)
