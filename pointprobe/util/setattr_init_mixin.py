
__all__ = ['SetattrInitMixin']

class SetattrInitMixin(object):
    '''Set instance attributes from keyword arguments.

Class attributes act as defaults, so a subclass documents its tunables
by declaring them at class level. Names listed in
:py:attr:`_required_attrs` must end up set, either as a default or
through a keyword argument.
'''
    _required_attrs = ()

    def __init__(self, **kwargs):
        ''' see class docstring for relevant attributes '''
        for k, v in kwargs.items():
            setattr(self, k, v)
        missing = [k for k in self._required_attrs if not hasattr(self, k)]
        if missing:
            raise TypeError("{} missing required attribute(s): {}".format(
                type(self).__name__, ', '.join(missing)))
