import operator

__all__ = [
    'ProbeError',
    'ProbeNotFound',
    'IndexOutOfRange',
    'DimensionMismatch']

class ProbeError(Exception):
    pass

class ProbeNotFound(ProbeError, LookupError):
    ''' No locally held cell contains the probe point. '''

class IndexOutOfRange(ProbeError, IndexError):
    pass

class DimensionMismatch(ProbeError, ValueError):
    pass

def check_index(index, size, what):
    '''Raise :py:class:`IndexOutOfRange` unless ``0 <= index < size``.
Negative indices are rejected rather than wrapped.'''
    index = operator.index(index)
    if not (0 <= index < size):
        raise IndexOutOfRange(
            "{} index {!r} out of range (size {})".format(what, index, size))
    return index
