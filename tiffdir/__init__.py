# tiffdir/__init__.py

from .tiffdir import *
from .tiffdir import __all__, __doc__, __version__

# constants are repeated for documentation

__version__ = __version__
"""Tiffdir version string."""
