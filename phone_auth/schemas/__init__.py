# Schemas package (re-export feature modules for stable imports)
from .auth import *
from .common import *
