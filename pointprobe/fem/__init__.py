from .lagrange import *
