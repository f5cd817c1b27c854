import logging
import warnings

import numpy as np
import pandas as pd
from sortedcontainers import SortedDict

from .errors import (
    ProbeError, ProbeNotFound, IndexOutOfRange, DimensionMismatch,
    check_index)
from .probe import Probe
from .statistics import StatisticsProbe
from .text import emit_text

__all__ = ['ProbesBase', 'Probes', 'StatisticsProbes']

class ProbesBase(object):
    '''Set of probes sharing one interpolation space.

Points that no local cell contains are skipped, so on a partitioned
mesh each process ends up holding the probes it owns. Probes keep the
global index of their point (its position in the order points were
added), and everything returned by this class is ordered by that
index.

Positions can only be added while the collection holds no
evaluations, so all local probes always share one history length.

Parameters
----------
points: array_like
    Array of shape :code:`(N, gdim)`, or flat of length
    :code:`N*gdim`.
space: :py:class:`~.interfaces.InterpolationSpace`
'''
    probe_class = None

    def __init__(self, points, space):
        self.probes = SortedDict()
        self.total_number_of_probes = 0
        self.value_size = None
        self.add_positions(points, space)

    def check_no_history(self):
        if self.number_of_evaluations:
            raise ProbeError(
                "cannot add positions after {} evaluations, clear first"
                .format(self.number_of_evaluations))

    def add_positions(self, points, space):
        self.check_no_history()
        gdim = space.geometric_dimension
        points = np.asarray(points, dtype='double')
        if points.ndim < 2:
            if points.size % gdim:
                raise DimensionMismatch(
                    "{} coordinates do not split into points of "
                    "dimension {}".format(points.size, gdim))
            points = points.reshape((-1, gdim))

        log = logging.getLogger('probe')
        offset = self.total_number_of_probes
        for i, x in enumerate(points):
            try:
                probe = self.probe_class(x, space)
            except ProbeNotFound:
                log.debug("skipping probe %d at %r: not found locally",
                          offset + i, x.tolist())
                continue
            if self.value_size is None:
                self.value_size = probe.value_size
            elif probe.value_size != self.value_size:
                raise DimensionMismatch(
                    "probe value size {} differs from collection's {}"
                    .format(probe.value_size, self.value_size))
            self.probes[offset + i] = probe
        self.total_number_of_probes = offset + len(points)
        log.debug("%d of %d probes found locally",
                  len(self.probes), self.total_number_of_probes)

    def __len__(self):
        return len(self.probes)

    def __iter__(self):
        return iter(self.probes.items())

    @property
    def global_indices(self):
        return list(self.probes.keys())

    def get_probe(self, global_index):
        try:
            return self.probes[global_index]
        except KeyError:
            raise IndexOutOfRange(
                "no local probe with global index {!r}".format(global_index))

    def evaluate(self, field):
        for probe in self.probes.values():
            probe.evaluate(field)

    __call__ = evaluate

    def _first(self):
        for probe in self.probes.values():
            return probe
        return None

    @property
    def number_of_evaluations(self):
        p = self._first()
        return 0 if p is None else p.eval_count

    def coordinates(self):
        if not len(self):
            return np.zeros((0, 3))
        return np.array([p.coordinates() for p in self.probes.values()])

    def clear(self):
        for probe in self.probes.values():
            probe.clear()

    def format_text(self, component=None):
        return ''.join(p.format_text(component=component, probe_id=i)
                       for i, p in self.probes.items())

    def dump(self, sink=None, component=None):
        ''' Dump every local probe, each labelled with its global index. '''
        return emit_text(self.format_text(component=component), sink)

class Probes(ProbesBase):
    ''' Collection of :py:class:`~.probe.Probe`. '''
    probe_class = Probe

    def check_no_history(self):
        super().check_no_history()
        if self.number_of_gradient_evaluations:
            raise ProbeError(
                "cannot add positions after {} gradient evaluations, "
                "clear first".format(self.number_of_gradient_evaluations))

    def evaluate_with_gradient(self, field):
        for probe in self.probes.values():
            probe.evaluate_with_gradient(field)

    @property
    def number_of_gradient_evaluations(self):
        p = self._first()
        return 0 if p is None else p.grad_eval_count

    def _empty_shape(self, snapshot, component, width):
        shape = [0]
        if component is None:
            shape.append(width)
        if snapshot is None:
            shape.append(0)
        return tuple(shape)

    def array(self, snapshot=None, component=None):
        '''Gather local probe values into an array, first axis over probes.

=========  =========  =====================================
snapshot   component  shape
=========  =========  =====================================
given      given      :code:`(nlocal,)`
given      None       :code:`(nlocal, value_size)`
None       given      :code:`(nlocal, eval_count)`
None       None       :code:`(nlocal, value_size, eval_count)`
=========  =========  =====================================
'''
        if not len(self):
            return np.zeros(self._empty_shape(snapshot, component, 0))
        return np.array([_select(
            snapshot, component,
            p.component_and_snapshot, p.snapshot, p.component_series,
            p.series) for p in self.probes.values()])

    def gradient_array(self, snapshot=None, component=None):
        ''' Same as :py:meth:`array` for the gradient series. '''
        if not len(self):
            return np.zeros(self._empty_shape(snapshot, component, 0))
        return np.array([_select(
            snapshot, component,
            p.gradient_component_and_snapshot, p.gradient_snapshot,
            p.gradient_component_series,
            p.gradient_series) for p in self.probes.values()])

    def erase_snapshot(self, index):
        check_index(index, self.number_of_evaluations, 'snapshot')
        for probe in self.probes.values():
            probe.erase_snapshot(index)

    def clear_gradient(self):
        for probe in self.probes.values():
            probe.clear_gradient()

    def restart(self, values):
        '''Append one saved snapshot to every local probe.

Parameters
----------
values: array_like
    Shape :code:`(nlocal, value_size)`, rows in global index order.
'''
        values = np.asarray(values, dtype='double')
        if not len(self):
            warnings.warn(RuntimeWarning(
                "restarting a probe collection with no local probes"))
        if len(values) != len(self):
            raise DimensionMismatch(
                "restart values for {} probes, have {} local probes"
                .format(len(values), len(self)))
        for probe, u in zip(self.probes.values(), values):
            probe.restart(u)

    def to_dataframe(self):
        '''Long table of all value series, one row per probe, snapshot
and component.'''
        columns = ['probe', 'snapshot', 'component', 'x', 'y', 'z', 'value']
        frames = []
        for i, p in self.probes.items():
            series = p.series()
            if not series.size:
                continue
            n, m = series.shape
            snap, comp = np.meshgrid(np.arange(m), np.arange(n),
                                     indexing='ij')
            x = p.coordinates()
            frames.append(pd.DataFrame({
                'probe': np.full(n*m, i),
                'snapshot': snap.ravel(),
                'component': comp.ravel(),
                'x': x[0], 'y': x[1], 'z': x[2],
                'value': series.T.ravel()}, columns=columns))
        if not frames:
            return pd.DataFrame(columns=columns)
        return pd.concat(frames, ignore_index=True)

def _select(snapshot, component, both, by_snapshot, by_component, every):
    if snapshot is None:
        return every() if component is None else by_component(component)
    else:
        return (by_snapshot(snapshot) if component is None
                else both(component, snapshot))

class StatisticsProbes(ProbesBase):
    '''Collection of :py:class:`~.statistics.StatisticsProbe`.
:py:meth:`array` returns the means.'''
    probe_class = StatisticsProbe

    def array(self, component=None):
        if component is not None and len(self):
            check_index(component, self.value_size, 'component')
        if not len(self):
            return np.zeros((0,) if component is not None
                            else (0, self.value_size or 0))
        means = np.array([p.mean() for p in self.probes.values()])
        return means if component is None else means[:, component]

    def restart(self, sums, eval_count):
        sums = np.asarray(sums, dtype='double')
        if len(sums) != len(self):
            raise DimensionMismatch(
                "restart sums for {} probes, have {} local probes"
                .format(len(sums), len(self)))
        for probe, s in zip(self.probes.values(), sums):
            probe.restart(s, eval_count)
