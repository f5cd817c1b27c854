from .simplex import *
from .locator import *
from .construction import *
