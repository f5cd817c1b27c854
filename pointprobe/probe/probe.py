import copy
import logging

import numpy as np

from .errors import ProbeNotFound, DimensionMismatch, check_index
from .interfaces import value_size
from .text import format_probe_text, emit_text

__all__ = ['ProbeBase', 'Probe']

class ProbeBase(object):
    '''Point bound to the local cell that contains it, with the basis
function values and first derivatives at that point cached.

Locating the cell and sampling the basis happen once, here. Evaluating
a field afterwards is a matrix-vector product against the coefficients
restricted to the cell.

Parameters
----------
point: array_like
    Physical coordinates. At least ``space.geometric_dimension``
    entries; extra trailing entries are ignored.
space: :py:class:`~.interfaces.InterpolationSpace`
    Space of the fields that will be probed.

Attributes
----------
cell: :py:class:`~.interfaces.CellHandle`
    Containing cell.
basis_weights: numpy.ndarray
    Read-only, shape :code:`(value_size, local_dof_count)`.
basis_gradient_weights: numpy.ndarray
    Read-only, shape :code:`(value_size*gdim, local_dof_count)`.

Raises
------
ProbeNotFound
    If no local cell contains the point.
'''
    float_format = '{:e}'
    label = 'Probe'

    def __init__(self, point, space):
        gdim = space.geometric_dimension
        point = np.asarray(point, dtype='double').ravel()
        if len(point) < gdim:
            raise DimensionMismatch(
                "point {!r} has fewer than {} coordinates"
                .format(point.tolist(), gdim))
        x = point[:gdim].copy()

        cell = space.locator.locate(x)
        if cell is None:
            raise ProbeNotFound(
                "probe point {!r} not found in any local cell"
                .format(x.tolist()))

        self.space = space
        self.cell = cell
        self.geometric_dimension = gdim
        self.value_size = value_size(space)

        coordinates = np.zeros(3)
        coordinates[:gdim] = x
        coordinates.flags.writeable = False
        self._coordinates = coordinates

        self.basis_weights, self.basis_gradient_weights = (
            self.sample_basis(space.basis, x, cell, space.local_dof_count))

        logging.getLogger('probe').debug(
            "probe at %r bound to cell %d", x.tolist(), cell.index)

        self._init_storage()

    def sample_basis(self, basis, x, cell, ndofs):
        n = self.value_size
        ng = n * self.geometric_dimension
        W = np.empty((n, ndofs))
        G = np.empty((ng, ndofs))
        for i in range(ndofs):
            W[:, i] = self._checked(basis.basis_value(i, x, cell), n,
                                    'basis value')
            G[:, i] = self._checked(basis.basis_gradient(i, x, cell), ng,
                                    'basis gradient')
        W.flags.writeable = False
        G.flags.writeable = False
        return W, G

    @staticmethod
    def _checked(vector, size, what):
        vector = np.asarray(vector, dtype='double').ravel()
        if len(vector) != size:
            raise DimensionMismatch("{} has length {}, expected {}".format(
                what, len(vector), size))
        return vector

    def _init_storage(self):
        raise NotImplementedError()

    @property
    def local_dof_count(self):
        return self.basis_weights.shape[1]

    @property
    def gradient_size(self):
        return self.value_size * self.geometric_dimension

    def coordinates(self):
        ''' Length 3 array; unused dimensions are zero. '''
        return self._coordinates.copy()

    def restrict(self, field):
        ''' Coefficients of `field` on the probe's cell. '''
        coefficients = np.asarray(
            self.space.restrictor.restrict(field, self.cell),
            dtype='double').ravel()
        if len(coefficients) != self.local_dof_count:
            raise DimensionMismatch(
                "restriction returned {} coefficients, expected {}".format(
                    len(coefficients), self.local_dof_count))
        return coefficients

    def copy(self):
        '''Copy sharing the (read-only) weights and cell binding, but
with its own series storage.'''
        return copy.copy(self)

    def __copy__(self):
        cls = type(self)
        new = cls.__new__(cls)
        new.__dict__.update(self.__dict__)
        new._copy_storage_from(self)
        return new

    def __deepcopy__(self, memo):
        return self.__copy__()

    def _copy_storage_from(self, other):
        raise NotImplementedError()

    def dump(self, sink=None, component=None, probe_id=0):
        '''Format with :py:meth:`format_text`, log it, and write it to
`sink` (see :py:func:`~.text.emit_text`). Returns the text.'''
        return emit_text(
            self.format_text(component=component, probe_id=probe_id), sink)

class Probe(ProbeBase):
    '''Time series of a field at a fixed point.

Each call to :py:meth:`evaluate` appends one snapshot with all
`value_size` components. :py:meth:`evaluate_with_gradient`
additionally appends one snapshot of the `value_size*gdim` gradient
entries. The two series have independent counters, so mixing both
evaluation modes leaves the gradient series shorter than the value
series.

Attributes
----------
eval_count: int
    Length of every value series.
grad_eval_count: int
    Length of every gradient series.
'''

    def _init_storage(self):
        self._values = [[] for j in range(self.value_size)]
        self._gradients = [[] for k in range(self.gradient_size)]
        self.eval_count = 0
        self.grad_eval_count = 0

    def _copy_storage_from(self, other):
        self._values = [list(s) for s in other._values]
        self._gradients = [list(s) for s in other._gradients]

    @property
    def number_of_evaluations(self):
        return self.eval_count

    def _append_values(self, coefficients):
        for series, v in zip(self._values,
                             self.basis_weights.dot(coefficients)):
            series.append(float(v))
        self.eval_count += 1

    def evaluate(self, field):
        self._append_values(self.restrict(field))

    __call__ = evaluate

    def evaluate_with_gradient(self, field):
        c = self.restrict(field)
        grad = self.basis_gradient_weights.dot(c)
        self._append_values(c)
        for series, v in zip(self._gradients, grad):
            series.append(float(v))
        self.grad_eval_count += 1

    def component_series(self, component):
        check_index(component, self.value_size, 'component')
        return np.array(self._values[component])

    def gradient_component_series(self, component):
        check_index(component, self.gradient_size, 'gradient component')
        return np.array(self._gradients[component])

    def series(self):
        ''' Array of shape :code:`(value_size, eval_count)`. '''
        return np.array(self._values).reshape(
            (self.value_size, self.eval_count))

    def gradient_series(self):
        ''' Array of shape :code:`(value_size*gdim, grad_eval_count)`. '''
        return np.array(self._gradients).reshape(
            (self.gradient_size, self.grad_eval_count))

    def snapshot(self, index):
        check_index(index, self.eval_count, 'snapshot')
        return np.array([s[index] for s in self._values])

    def gradient_snapshot(self, index):
        check_index(index, self.grad_eval_count, 'gradient snapshot')
        return np.array([s[index] for s in self._gradients])

    def component_and_snapshot(self, component, index):
        check_index(component, self.value_size, 'component')
        check_index(index, self.eval_count, 'snapshot')
        return self._values[component][index]

    def gradient_component_and_snapshot(self, component, index):
        check_index(component, self.gradient_size, 'gradient component')
        check_index(index, self.grad_eval_count, 'gradient snapshot')
        return self._gradients[component][index]

    def erase_snapshot(self, index):
        ''' Remove one value snapshot. The gradient series is untouched. '''
        check_index(index, self.eval_count, 'snapshot')
        for s in self._values:
            del s[index]
        self.eval_count -= 1

    def erase_gradient_snapshot(self, index):
        check_index(index, self.grad_eval_count, 'gradient snapshot')
        for s in self._gradients:
            del s[index]
        self.grad_eval_count -= 1

    def clear(self):
        for s in self._values:
            s.clear()
        self.eval_count = 0

    def clear_gradient(self):
        for s in self._gradients:
            s.clear()
        self.grad_eval_count = 0

    def restart(self, initial_values):
        '''Append one snapshot taken from saved state, without touching
the field or the basis.'''
        u = np.asarray(initial_values, dtype='double').ravel()
        if len(u) != self.value_size:
            raise DimensionMismatch(
                "restart values have length {}, expected {}".format(
                    len(u), self.value_size))
        for series, v in zip(self._values, u):
            series.append(float(v))
        self.eval_count += 1

    def format_text(self, component=None, probe_id=0):
        '''Text block with the label, the number of evaluations, the
coordinates, then either the series of `component` (one value per
line) or every snapshot (one line each).'''
        if component is None:
            title = 'Values for all components:'
            rows = zip(*self._values)
        else:
            check_index(component, self.value_size, 'component')
            title = 'Values for component {}'.format(component)
            rows = ((v,) for v in self._values[component])
        return format_probe_text(
            probe_id, self.eval_count, self._coordinates, title, rows,
            float_format=self.float_format, label=self.label)
