"""
Tests for the XYZ parser

"""

import unittest
import os
import tempfile

import numpy as np

from ... import formats
from ...exceptions import FormatError, FormatGuessError
from ..xyz import parse_comment

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

fixtures = os.path.join(os.path.dirname(__file__), 'fixtures')
isolated_xyz = os.path.join(fixtures, 'isolated.xyz')
trajectory_xyz = os.path.join(fixtures, 'trajectory.xyz')


class XYZTest(unittest.TestCase):

    def test_isolated(self):
        struc = formats.read(isolated_xyz)
        self.assertEqual(struc.natoms, 4)
        self.assertEqual(struc.nframes, 1)
        self.assertFalse(struc.pbc)
        self.assertIsNone(struc.energy[0])
        self.assertIsNone(struc.forces[0])
        self.assertEqual(struc.composition, {'C': 1, 'H': 3})
        self.assertEqual(struc.comments, ['methane'])

    def test_trajectory(self):
        struc = formats.read(trajectory_xyz)
        self.assertEqual(struc.natoms, 3)
        self.assertEqual(struc.nframes, 2)
        self.assertTrue(struc.pbc)
        self.assertTrue(np.allclose(struc.box, [10.0, 11.0, 12.5]))
        self.assertEqual(struc.energy, [-15.25, -15.1])
        self.assertTrue(np.allclose(struc.forces[1][0], [0.12, 0.0, 0.0]))
        self.assertTrue(np.allclose(struc.coords[1][2], [1.1, 1.95, 0.1]))
        self.assertEqual(list(struc.types), ['Si', 'Si', 'O'])

    def test_write(self):
        struc = formats.read(trajectory_xyz)
        with tempfile.TemporaryDirectory() as d:
            tmp = os.path.join(d, 'out.xyz')
            formats.write(struc, filename=tmp)
            struc2 = formats.read(tmp)
        self.assertEqual(struc2.nframes, struc.nframes)
        self.assertEqual(struc2.energy, struc.energy)
        self.assertTrue(np.allclose(struc2.box, struc.box))
        for i in range(struc.nframes):
            self.assertTrue(np.allclose(struc2.coords[i], struc.coords[i]))
            self.assertTrue(np.allclose(struc2.forces[i], struc.forces[i]))

    def test_amend_energy(self):
        struc = formats.read(isolated_xyz, energy=-24.0)
        self.assertEqual(struc.energy[-1], -24.0)

    def test_parse_comment(self):
        box, energy = parse_comment("energy = -1.5d0")
        self.assertIsNone(box)
        self.assertEqual(energy, -1.5)
        box, energy = parse_comment("a=3 b=4.5 c=5e0")
        self.assertEqual(box, [3.0, 4.5, 5.0])
        self.assertIsNone(energy)
        self.assertEqual(parse_comment("no information"), (None, None))

    def test_incomplete_frame(self):
        with tempfile.TemporaryDirectory() as d:
            tmp = os.path.join(d, 'broken.xyz')
            with open(tmp, 'w') as fp:
                fp.write("3\ncomment\nH 0.0 0.0 0.0\n")
            with self.assertRaises(FormatError):
                formats.read(tmp)

    def test_guess_format(self):
        self.assertEqual(formats.guess_format('some/path/file.XYZ'), 'xyz')
        with self.assertRaises(FormatGuessError):
            formats.guess_format('structure.unknown')


if __name__ == "__main__":
    unittest.main()
