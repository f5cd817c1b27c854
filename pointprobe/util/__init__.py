from .setattr_init_mixin import *
from .logging import *
