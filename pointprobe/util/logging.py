import logging
import os

from cached_property import cached_property

from .setattr_init_mixin import SetattrInitMixin

__all__ = [
    'NameLevelFilter',
    'TypicalLoggingSetup']

def is_under(prefix, x):
    return x == prefix or prefix == '' or x.startswith(prefix + '.')

class NameLevelFilter(logging.Filter):
    '''Pass a record if its level reaches the level of the first rule
whose logger name prefix matches the record's logger name. Records
matching no rule are dropped.

Parameters
----------
name_levelno_rules: list
    List of :code:`(logger_name_prefix, levelno)` pairs, most specific
    first. An empty prefix matches every logger.
'''
    def __init__(self, name_levelno_rules, *args, **kwargs):
        self.name_levelno_rules = name_levelno_rules
        super().__init__(*args, **kwargs)

    def filter(self, record):
        name, level = record.name, record.levelno
        for rule_name, rule_level in self.name_levelno_rules:
            if is_under(rule_name, name):
                return level >= rule_level
        return False

class TypicalLoggingSetup(SetattrInitMixin):
    """Class that sets up logging and filtering in a typical way for
probe runs.

Probe dumps go to the ``probe.dump`` logger at INFO level, so they
land in the info log and on the console. Construction details
(skipped points, located cells) are DEBUG and only reach the debug
log.

Parameters
----------
filename_prefix: str
    Prefix for the ``debug.log`` and ``info.log`` files.
truncate: bool, optional
    Truncate (delete) the log file contents before starting to write
    to it. (default: True)
console: bool, optional
    Also log to stderr. (default: True)
"""
    _required_attrs = ('filename_prefix',)
    truncate = True
    console = True

    @property
    def _mode(self):
        return "w" if self.truncate else "a"

    def ensure_parent_dir(self, filename):
        dirname = os.path.dirname(filename)
        if dirname:
            os.makedirs(dirname, exist_ok=True)

    @cached_property
    def logfile_formatter(self):
        return logging.Formatter(
            '%(asctime)s %(name)-12s %(levelname)-8s %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S')

    @cached_property
    def console_formatter(self):
        return logging.Formatter(
            '%(asctime)s %(name)-12s: %(levelname)-8s %(message)s',
            datefmt='%H:%M:%S')

    @property
    def debug_filename(self):
        return self.filename_prefix + 'debug.log'

    @property
    def info_filename(self):
        return self.filename_prefix + 'info.log'

    @cached_property
    def stream_debug(self):
        self.ensure_parent_dir(self.debug_filename)
        h = logging.FileHandler(filename=self.debug_filename, mode=self._mode)
        h.setFormatter(self.logfile_formatter)
        return h

    @cached_property
    def stream_info(self):
        self.ensure_parent_dir(self.info_filename)
        h = logging.FileHandler(filename=self.info_filename, mode=self._mode)
        h.setFormatter(self.logfile_formatter)
        return h

    @cached_property
    def stream_console(self):
        h = logging.StreamHandler()
        h.setFormatter(self.console_formatter)
        return h

    @property
    def handlers(self):
        hs = [self.stream_debug, self.stream_info]
        if self.console:
            hs.append(self.stream_console)
        return hs

    def setup_handlers(self):
        for h in self.handlers:
            logging.getLogger('').addHandler(h)

    def setup_filters(self):
        self.stream_debug.addFilter(NameLevelFilter([
            ('probe', logging.DEBUG),
            ('', logging.INFO)]))
        self.stream_info.addFilter(NameLevelFilter([
            ('probe.locator', logging.WARNING),
            ('', logging.INFO)]))
        if self.console:
            self.stream_console.addFilter(NameLevelFilter([
                ('probe.locator', logging.ERROR),
                ('', logging.INFO)]))

    def setup_logging(self):
        logging.getLogger('').setLevel(logging.NOTSET)

    def teardown(self):
        ''' Remove and close the handlers installed by :py:meth:`setup`. '''
        root = logging.getLogger('')
        for h in self.handlers:
            root.removeHandler(h)
            h.close()

    def setup(self):
        self.setup_logging()
        self.setup_handlers()
        self.setup_filters()
