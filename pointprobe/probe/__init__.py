from .errors import *
from .interfaces import *
from .probe import *
from .statistics import *
from .collection import *
