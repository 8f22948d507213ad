"""
A type to represent atomic structures and trajectories.

"""

import numpy as np

from .exceptions import ConfigurationError

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


class AtomicStructure(object):
    """
    A container class for atomic structure information.

    Class Attributes:

      comments   list of comments known for this structure
      coords[i]  (N, 3) array of atomic Cartesian coordinates of all atoms
                 in the structure and for the i-th frame
      energy[i]  total energy (if known) of the i-th frame
      forces[i]  (N, 3) array of Cartesian atomic forces for the i-th
                 frame, or None if not known
      box        edge lengths (a, b, c) of an orthorhombic periodic box,
                 or None for isolated structures
      types      atomic species of each atom

    """

    def __init__(self, coords, types, box=None, energy=None, forces=None):
        self.comments = []
        self.types = np.array(types, dtype=str)
        coords = np.array(coords, dtype=float).reshape(-1, 3)
        if len(coords) != len(self.types):
            raise ConfigurationError(
                "{} coordinates for {} atom types.".format(
                    len(coords), len(self.types)))
        self.coords = [coords]
        self.energy = [energy]
        self.forces = [None]
        self.forces[0] = self._check_forces(forces)
        if box is None or len(box) == 0:
            self.box = None
        else:
            self.box = np.array(box, dtype=float).reshape(3)

    def _check_forces(self, forces):
        if forces is None or len(forces) == 0:
            return None
        forces = np.array(forces, dtype=float).reshape(-1, 3)
        if len(forces) != self.natoms:
            raise ConfigurationError(
                "{} force vectors for {} atoms.".format(
                    len(forces), self.natoms))
        return forces

    def __str__(self):
        ostr = "\n"
        ostr += " Composition        : "
        ostr += " ".join(sorted("{}{}".format(k, v)
                                for k, v in self.composition.items())) + "\n"
        ostr += " Number of atoms    : {}\n".format(self.natoms)
        if self.nframes > 1:
            ostr += " Number of frames   : {}\n".format(self.nframes)
        if self.energy[-1] is not None:
            ostr += " Total energy       : {}\n".format(self.energy[-1])
        if self.pbc:
            ostr += " Box                : {:.8f} {:.8f} {:.8f}\n".format(
                *self.box)
        return ostr

    @property
    def pbc(self):
        return self.box is not None

    @property
    def natoms(self):
        """Total number of atoms in the structure"""
        return len(self.coords[-1])

    @property
    def ncomments(self):
        return len(self.comments)

    @property
    def nframes(self):
        """Total number of frames (configurations)"""
        return len(self.coords)

    @property
    def composition(self):
        """Composition as dictionary"""
        species, counts = np.unique(self.types, return_counts=True)
        return {str(s): int(c) for s, c in zip(species, counts)}

    def add_frame(self, coords, energy=None, forces=None):
        coords = np.array(coords, dtype=float).reshape(-1, 3)
        if len(coords) != self.natoms:
            raise ConfigurationError(
                "Frame with {} atoms added to a structure with {} "
                "atoms.".format(len(coords), self.natoms))
        self.coords.append(coords)
        self.energy.append(energy)
        self.forces.append(self._check_forces(forces))

    def add_comment(self, comment):
        self.comments.append(comment)
