"""
Abstract parser class to be inherited from.

"""

from abc import ABC, abstractmethod
import sys

import numpy as np

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


class ParserABC(ABC):

    _amend_args = ['energy', 'forces']

    @abstractmethod
    def __init__(self):
        self.name = None
        self.description = None
        self.extensions = None
        self.default_file_names = None

    def read(self, filename, **kwargs):
        raise NotImplementedError("No parser for this format available.")

    def write(self, struc, filename, **kwargs):
        raise NotImplementedError("Output not implemented for this format.")

    def __str__(self):
        out = " {:10s}  ".format(self.name)
        out += "{:30s}  ".format(self.description)
        for ext in self.extensions:
            out += "{} ".format(ext)
        return out

    def _amend(self, struc, energy=None, forces=None, **kwargs):
        """
        Add information to an AtomicStructure after reading.  To be
        called at the end of 'read()' with the remaining keyword
        arguments.

        Arguments:
          struc        an instance of AtomicStructure
          energy       energy of the final frame of the structure
          forces       set all atomic force components of all frames to
                       this value (mainly useful to set all forces to 0)

        The input structure is modified in place.

        """
        if energy is not None:
            if struc.nframes > 1:
                sys.stderr.write(
                    "Warning: Energy assigned to final frame only.\n")
            if struc.energy[-1] is not None:
                sys.stderr.write(
                    "Warning: Overwriting existing energy value.\n")
            struc.energy[-1] = float(energy)

        if forces is not None:
            for i in range(struc.nframes):
                struc.forces[i] = (np.zeros_like(struc.coords[i])
                                   + float(forces))

    def _check_amend_args(self, **kwargs):
        """
        Warn about keyword arguments that _amend() does not support.
        Call this method when entering 'read()'.

        """
        for k in kwargs:
            if k not in self._amend_args:
                sys.stderr.write(
                    "Warning: unsupported keyword: {}\n".format(k))
