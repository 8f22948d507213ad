"""
Read and write XYZ coordinates files.

Each frame is

  <number of atoms>
  <comment>
  <type> <x> <y> <z> [<fx> <fy> <fz>]
  ...

The comment line may define an orthorhombic periodic box as
``a = <a>, b = <b>, c = <c>`` and the total energy as
``energy = <E>``; anything else is kept as a comment.

"""

import re
import sys

from ..exceptions import FormatError
from ..structure import AtomicStructure
from .parser_abc import ParserABC

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

_FLOAT = r"([-+]?(?:\d+\.?\d*|\.\d+)(?:[eEdD][-+]?\d+)?)"
_KEY_VALUE = re.compile(r"\b(a|b|c|energy)\s*=\s*" + _FLOAT)


def parse_comment(comment):
    """
    Returns:
      tuple (box, energy); box is [a, b, c] or None, energy is a float
      or None

    """
    values = {k: float(v.replace('d', 'e').replace('D', 'e'))
              for k, v in _KEY_VALUE.findall(comment)}
    box = None
    if all(k in values for k in "abc"):
        box = [values["a"], values["b"], values["c"]]
    return box, values.get("energy")


class XYZParser(ParserABC):
    def __init__(self):
        self.name = 'xyz'
        self.description = 'XYZ Cartesian coordinates'
        self.extensions = ['xyz']
        self.default_file_names = []

    def read(self, infile, **kwargs):
        """
        Parse atomic structure file in XYZ format.

        Arguments:
          infile   name of the input file or file object

        Returns:
          instance of the AtomicStructure class

        """
        self._check_amend_args(**kwargs)

        if hasattr(infile, "readline"):
            f = infile
            close_file = False
        else:
            f = open(infile, 'r')
            close_file = True

        struc = None
        try:
            line = f.readline()
            while line:
                if len(line.strip()) == 0:
                    line = f.readline()
                    continue
                try:
                    natoms = int(line.strip())
                except ValueError:
                    raise FormatError(
                        "xyz (expected number of atoms, found "
                        "'{}')".format(line.strip()))
                comment = f.readline().strip()
                box, energy = parse_comment(comment)
                coords = []
                forces = []
                types = []
                for i in range(natoms):
                    fields = f.readline().split()
                    if len(fields) < 4:
                        raise FormatError(
                            "xyz (incomplete frame with {} of {} "
                            "atoms)".format(i, natoms))
                    types.append(fields[0])
                    coords.append([float(el) for el in fields[1:4]])
                    if len(fields) >= 7:
                        forces.append([float(el) for el in fields[4:7]])
                if struc is None:
                    struc = AtomicStructure(coords, types, box=box,
                                            energy=energy, forces=forces)
                else:
                    struc.add_frame(coords, energy=energy, forces=forces)
                if len(comment) > 0:
                    struc.add_comment(comment)
                line = f.readline()
        finally:
            if close_file:
                f.close()

        if struc is None:
            raise FormatError("xyz (no atoms found)")
        self._amend(struc, **kwargs)
        return struc

    def write(self, struc, outfile=None, frame=None, **kwargs):
        """
        Write atomic structure to file in XYZ format.

        Arguments:
          struc       instance of the AtomicStructure class
          outfile     name of the output file; if None, the contents
                      will be written to stdout
          frame       number of frame to write out; if None, all frames
                      will be written to a trajectory file

        """
        for kw in kwargs:
            sys.stderr.write("Warning: unsupported argument: {}\n".format(kw))

        if hasattr(outfile, 'write'):
            f = outfile
            closefile = False
        elif outfile:
            f = open(outfile, 'w')
            closefile = True
        else:
            f = sys.stdout
            closefile = False

        frames = range(struc.nframes) if frame is None else [frame]
        for i in frames:
            f.write("{:d}\n".format(struc.natoms))
            comment = []
            if struc.pbc:
                comment.append("a = {}, b = {}, c = {}".format(*struc.box))
            if struc.energy[i] is not None:
                comment.append("energy = {}".format(struc.energy[i]))
            if len(comment) == 0:
                comment.append("XYZ Cartesian atomic coordinates")
            f.write(", ".join(comment) + "\n")
            forces = struc.forces[i]
            for j in range(struc.natoms):
                f.write("{:2s}  ".format(struc.types[j]))
                f.write("{:15.8f}  {:15.8f}  {:15.8f}".format(
                    *struc.coords[i][j]))
                if forces is not None:
                    f.write("  {:15.8f}  {:15.8f}  {:15.8f}".format(
                        *forces[j]))
                f.write("\n")

        if closefile:
            f.close()
