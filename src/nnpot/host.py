"""
Minimal host for a Potential: accumulate the per-atom results into total
energies, forces, and virials, optionally with several processes.

An MD engine would do the same with its own arrays; these helpers are
used by the command line tools and for testing.

"""

import functools
import multiprocessing as mp

import numpy as np
import pandas as pd
from tqdm import tqdm

from .neighbors import build_neighbor_lists
from .potential import Potential, AtomResult

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


class ForceSink(object):
    """
    Accumulator for the results of Potential.compute_step().

    Attributes:
      energy (float): total energy
      per_atom_energy: (N,) atomic energies
      forces: (N, 3) total force on each atom
      virial: (6,) virial in the order xx, yy, zz, xy, xz, yz
      extrapolated: sorted list of atoms with extrapolated inputs

    """

    def __init__(self, num_atoms: int):
        self.num_atoms = num_atoms
        self.energy = 0.0
        self.per_atom_energy = np.zeros(num_atoms)
        self.forces = np.zeros((num_atoms, 3))
        self.virial = np.zeros(6)
        self._extrapolated = set()

    @property
    def extrapolated(self):
        return sorted(self._extrapolated)

    def add(self, result: AtomResult):
        self.energy += result.energy
        self.per_atom_energy[result.index] += result.energy
        self.forces[result.index] += result.center_force
        # a neighbor can appear more than once (periodic images)
        np.add.at(self.forces, result.neighbors, result.neighbor_forces)
        self.virial += result.virial
        if len(result.extrapolated) > 0:
            self._extrapolated.add(result.index)

    def merge(self, other):
        """
        Add the partial sums of another sink.

        """
        if other.num_atoms != self.num_atoms:
            raise ValueError(
                "Cannot merge sinks for {} and {} atoms.".format(
                    self.num_atoms, other.num_atoms))
        self.energy += other.energy
        self.per_atom_energy += other.per_atom_energy
        self.forces += other.forces
        self.virial += other.virial
        self._extrapolated |= other._extrapolated
        return self

    def to_dataframe(self, types=None):
        """
        Per-atom energies and forces as pandas DataFrame.

        """
        df = pd.DataFrame({
            "energy": self.per_atom_energy,
            "fx": self.forces[:, 0],
            "fy": self.forces[:, 1],
            "fz": self.forces[:, 2]})
        if types is not None:
            df.insert(0, "type", list(types))
        df.index.name = "atom"
        return df


def _evaluate_atoms(potential, num_atoms, neighbor_lists):
    """
    Evaluate a chunk of atoms into a new sink.

    """
    sink = ForceSink(num_atoms)
    for atom_view in neighbor_lists:
        sink.add(potential.compute_step(atom_view))
    return sink


def evaluate(potential: Potential, positions, neighbor_lists, atoms=None,
             cores=1, progress=False):
    """
    Evaluate the potential for all (or selected) atoms.

    Arguments:
      potential       a configured Potential
      positions       (N, 3) atomic positions (only their number is used)
      neighbor_lists  one AtomView per atom, e.g., from
                      nnpot.neighbors.build_neighbor_lists()
      atoms (list)    indices of the central atoms to evaluate; if None,
                      all atoms are considered
      cores (int)     number of processes to use for computation
      progress        show a progress bar (serial evaluation only)

    Returns:
      ForceSink with the accumulated results

    """
    num_atoms = len(positions)
    if atoms is None:
        atoms = range(num_atoms)
    views = [neighbor_lists[i] for i in atoms]

    if cores == 1:
        sink = ForceSink(num_atoms)
        for atom_view in tqdm(views, desc="Atoms", ncols=80, leave=False,
                              disable=not progress):
            sink.add(potential.compute_step(atom_view))
        return sink

    chunks = [views[i::cores] for i in range(cores)]
    evaluate_chunk = functools.partial(_evaluate_atoms, potential,
                                       num_atoms)
    with mp.Pool(processes=cores) as pool:
        partial_sinks = pool.map(evaluate_chunk, chunks)
    sink = ForceSink(num_atoms)
    for partial_sink in partial_sinks:
        sink.merge(partial_sink)
    return sink


def evaluate_structure(potential: Potential, positions, box=None, cores=1,
                       progress=False):
    """
    Build neighbor lists and evaluate the potential for all atoms.  The
    neighbor lists extend to the potential's outer cutoff if it has one.

    """
    cutoff = getattr(potential, "outer_cutoff", None) or potential.cutoff
    neighbor_lists = build_neighbor_lists(positions, cutoff, box=box)
    return evaluate(potential, positions, neighbor_lists, cores=cores,
                    progress=progress)


def featurize_structure(potential, positions, box=None):
    """
    Feature vectors (without centering) and atomic energies of all atoms
    of one configuration.

    Args:
      potential: a configured NNPotential
      positions: (N, 3) atomic positions
      box: (optional) orthorhombic periodic box

    Returns:
      tuple (features, energies) of shapes (N, n) and (N,)

    """
    cutoff = potential.outer_cutoff or potential.cutoff
    neighbor_lists = build_neighbor_lists(positions, cutoff, box=box)
    features = np.zeros((len(neighbor_lists), len(potential.descriptors)))
    energies = np.zeros(len(neighbor_lists))
    for atom_view in neighbor_lists:
        env = potential.build_environment(atom_view)
        features[atom_view.index] = potential.encoder.raw_features(env)
        energies[atom_view.index], _ = potential.network.forward(
            potential.encoder.encode(env))
    return features, energies


def total_energy(potential: Potential, positions, box=None):
    return evaluate_structure(potential, positions, box=box).energy


def finite_difference_forces(potential: Potential, positions, box=None,
                             delta=1.0e-5):
    """
    Reference forces F = -dE/dR from central differences of the total
    energy.

    """
    positions = np.array(positions, dtype=float)
    forces = np.zeros_like(positions)
    for i in range(len(positions)):
        for k in range(3):
            positions[i, k] += delta
            e_plus = total_energy(potential, positions, box=box)
            positions[i, k] -= 2.0*delta
            e_minus = total_energy(potential, positions, box=box)
            positions[i, k] += delta
            forces[i, k] = -(e_plus - e_minus)/(2.0*delta)
    return forces
