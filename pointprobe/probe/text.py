import logging
import os

from .interfaces import FileTextSink

__all__ = ['format_probe_text', 'emit_text']

def format_probe_text(probe_id, num_evals, coordinates, title, rows,
                      float_format='{:e}', label='Probe'):
    '''Lay out a probe dump.

Parameters
----------
probe_id: int
    Identifier printed in the first line.
num_evals: int
    Number of evaluations.
coordinates: sequence
    The three probe coordinates.
title: str
    Line printed before the data rows.
rows: iterable
    Each row is a sequence of floats, written space separated on one
    line.
'''
    fmt = float_format.format
    lines = [
        '{} id = {}'.format(label, probe_id),
        'Number of evaluations = {}'.format(num_evals),
        'Coordinates:',
        ' '.join(fmt(x) for x in coordinates),
        title]
    lines.extend(' '.join(fmt(x) for x in row) for row in rows)
    lines.append('')
    return '\n'.join(lines) + '\n'

def emit_text(text, sink):
    '''Send `text` to the ``probe.dump`` logger and to `sink`.

`sink` may be a :py:class:`~.interfaces.TextSink`, a file name, or
None (log only).'''
    logging.getLogger('probe.dump').info(text)
    if sink is None:
        return text
    if isinstance(sink, (str, os.PathLike)):
        sink = FileTextSink(sink)
    sink.write(text)
    return text
