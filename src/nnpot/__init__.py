"""
Neural-network interatomic potential with atom-centered symmetry
functions.

"""

import os

from .exceptions import (ConfigurationError, UsageError,
                         RuntimeInvariantViolation, ExtrapolationWarning)
from .loader import load_potential, write_potential
from .potential import Potential, NNPotential, AtomView, AtomResult

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

with open(os.path.join(os.path.dirname(__file__), "VERSION")) as fp:
    __version__ = fp.read().strip()

__all__ = ["ConfigurationError", "UsageError", "RuntimeInvariantViolation",
           "ExtrapolationWarning", "load_potential", "write_potential",
           "Potential", "NNPotential", "AtomView", "AtomResult"]
