import numpy as np

from .errors import ProbeError, DimensionMismatch, check_index
from .probe import ProbeBase
from .text import format_probe_text

__all__ = ['StatisticsProbe']

class StatisticsProbe(ProbeBase):
    '''Probe that keeps running sums instead of a time series.

For `n` components, the sums are stored in one vector of length
:code:`n + n*(n+1)/2`: first the `n` sums of :math:`u_i`, then the
sums of :math:`u_i u_j` for :math:`i \\le j` in row-major upper
triangle order. For a velocity field this gives the mean and the
Reynolds stresses.
'''
    label = 'StatisticsProbe'

    def _init_storage(self):
        self._sums = np.zeros(self.sums_size)
        self.eval_count = 0

    def _copy_storage_from(self, other):
        self._sums = other._sums.copy()

    @property
    def number_of_evaluations(self):
        return self.eval_count

    @property
    def sums_size(self):
        n = self.value_size
        return n + n*(n + 1)//2

    @property
    def _triu(self):
        return np.triu_indices(self.value_size)

    def evaluate(self, field):
        u = self.basis_weights.dot(self.restrict(field))
        n = self.value_size
        self._sums[:n] += u
        self._sums[n:] += np.outer(u, u)[self._triu]
        self.eval_count += 1

    __call__ = evaluate

    def sums(self):
        return self._sums.copy()

    def product_sums(self):
        return self._sums[self.value_size:].copy()

    def mean(self):
        if self.eval_count == 0:
            raise ProbeError("mean of a statistics probe with no evaluations")
        return self._sums[:self.value_size] / self.eval_count

    def variance(self):
        ''' Upper triangle of the covariance, same ordering as
:py:meth:`product_sums`. '''
        mean = self.mean()
        return (self.product_sums() / self.eval_count -
                np.outer(mean, mean)[self._triu])

    def clear(self):
        self._sums[:] = 0.0
        self.eval_count = 0

    def restart(self, sums, eval_count):
        ''' Replace the running sums and count with saved state. '''
        sums = np.asarray(sums, dtype='double').ravel()
        if len(sums) != self.sums_size:
            raise DimensionMismatch(
                "restart sums have length {}, expected {}".format(
                    len(sums), self.sums_size))
        if eval_count < 0:
            raise ValueError("negative eval_count {!r}".format(eval_count))
        self._sums = sums.copy()
        self.eval_count = int(eval_count)

    def format_text(self, component=None, probe_id=0):
        if component is None:
            title = 'Mean values for all components:'
            rows = [self.mean()] if self.eval_count else []
        else:
            check_index(component, self.value_size, 'component')
            title = 'Mean value for component {}'.format(component)
            rows = [(self.mean()[component],)] if self.eval_count else []
        return format_probe_text(
            probe_id, self.eval_count, self._coordinates, title, rows,
            float_format=self.float_format, label=self.label)
