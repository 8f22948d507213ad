"""
Assembly of Cartesian forces from the network gradient dE/dG and the
geometric derivatives of the symmetry functions.

For a feature gradient g = dE_i/dG the force on atom a is

    F_a = -sum_s g[s] * dG_s/dR_a

Every pair and triplet term of atom i only depends on relative
positions, so the force on the central atom is always the negative sum
of the forces on its neighbors.

"""

from dataclasses import dataclass

import numpy as np

from .environment import AtomicEnvironment
from .exceptions import ConfigurationError
from .symmetry import (ANGULAR_FORMS, DescriptorSet, dg2_dr,
                       angular_gradients)

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


@dataclass(eq=False)
class ForceContribution:
    """
    Forces resulting from the energy of one central atom.

    Attributes
    ----------
    center : int
        Index of the central atom.
    center_force : (3,) array
        Force on the central atom.
    neighbors : (n,) int array
        Atom indices of the retained neighbors (pair order).
    neighbor_forces : (n, 3) array
        Force on each retained neighbor.
    virial : (6,) array
        Virial sum_a r_a (x) F_a of the atom's terms with positions taken
        relative to the central atom, in the order xx, yy, zz, xy, xz, yz.
    """
    center: int
    center_force: np.ndarray
    neighbors: np.ndarray
    neighbor_forces: np.ndarray
    virial: np.ndarray

    @property
    def net_force(self):
        return self.center_force + np.sum(self.neighbor_forces, axis=0)


def voigt(tensor):
    """3x3 tensor -> (xx, yy, zz, xy, xz, yz)"""
    return np.array([tensor[0, 0], tensor[1, 1], tensor[2, 2],
                     tensor[0, 1], tensor[0, 2], tensor[1, 2]])


class ForceAssembler(object):

    def __init__(self, descriptors: DescriptorSet, angular_form='g5'):
        if angular_form not in ANGULAR_FORMS:
            raise ConfigurationError(
                "angular_form must be one of {}, got '{}'".format(
                    ANGULAR_FORMS, angular_form))
        self.descriptors = descriptors
        self.angular_form = angular_form

    def pair_forces(self, env: AtomicEnvironment, gradient):
        """
        Forces on the neighbors from the radial symmetry functions.

        Returns:
          (n, 3) array in pair order

        """
        d = self.descriptors
        forces = np.zeros((env.num_pairs, 3))
        if d.num_radial == 0 or env.num_pairs == 0:
            return forces
        g = gradient[d.radial_slots].reshape(-1, 1)
        dg = dg2_dr(env.distances, d.radial_eta, d.radial_cutoff,
                    d.radial_shift)
        fpair = np.sum(-g*dg, axis=0)/env.distances
        return fpair[:, np.newaxis]*env.displacements

    def triplet_forces(self, env: AtomicEnvironment, gradient):
        """
        Forces on the neighbors from the angular symmetry functions.
        Each triplet contributes to both of its neighbors j and k.

        Returns:
          (n, 3) array in pair order

        """
        d = self.descriptors
        forces = np.zeros((env.num_pairs, 3))
        if d.num_angular == 0 or env.num_triplets == 0:
            return forces
        g = gradient[d.angular_slots].reshape(-1, 1, 1)
        dg_drj, dg_drk = angular_gradients(
            self.angular_form, env.triplet_geometry(), d.angular_eta,
            d.angular_cutoff, d.angular_zeta, d.angular_lambda)
        fj = np.sum(-g*dg_drj, axis=0)
        fk = np.sum(-g*dg_drk, axis=0)
        np.add.at(forces, env.triplets[:, 0], fj)
        np.add.at(forces, env.triplets[:, 1], fk)
        return forces

    def assemble(self, env: AtomicEnvironment, gradient):
        """
        Args:
          env: environment of the central atom
          gradient: dE/dG of the central atom's energy, one value per
            symmetry function

        Returns:
          ForceContribution

        """
        gradient = np.asarray(gradient, dtype=float).reshape(-1)
        if len(gradient) != len(self.descriptors):
            raise ValueError(
                "Gradient of length {} for {} symmetry functions.".format(
                    len(gradient), len(self.descriptors)))
        neighbor_forces = (self.pair_forces(env, gradient)
                           + self.triplet_forces(env, gradient))
        # action-reaction: no net force from internal terms
        center_force = -np.sum(neighbor_forces, axis=0)
        virial = voigt(env.displacements.T @ neighbor_forces)
        return ForceContribution(
            center=env.center, center_force=center_force,
            neighbors=env.neighbors, neighbor_forces=neighbor_forces,
            virial=virial)
