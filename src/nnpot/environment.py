"""
Local atomic environment of one central atom.

An ``AtomicEnvironment`` collects everything the feature encoder and
the force assembler need to know about the neighborhood of one atom in
one step: the retained neighbor pairs and all unordered triplets formed
by two of them.  It is built from the neighbor list supplied by the
host, used for one evaluation, and discarded.

"""

from collections import namedtuple
from dataclasses import dataclass
import warnings

import numpy as np

from .exceptions import RuntimeInvariantViolation, ConfigurationError
from .symmetry import TripletGeometry

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

ON_VIOLATION = ('raise', 'skip')

Pair = namedtuple("Pair", ["index", "displacement", "distance"])


@dataclass(frozen=True, eq=False)
class AtomicEnvironment:
    """
    Attributes
    ----------
    center : int
        Index of the central atom i.
    neighbors : (n,) int array
        Atom indices of the retained neighbors j, in iteration order.
        The same atom may appear more than once (periodic images).
    displacements : (n, 3) array
        Vectors R_j - R_i.
    distances : (n,) array
        |R_j - R_i|, all below the potential cutoff.
    triplets : (m, 2) int array
        Positions (p, q), p < q, of the two pairs forming each triplet
        in the pair arrays above.
    rjk_vec : (m, 3) array
        Vectors R_k - R_j of each triplet.
    rjk : (m,) array
        Third-side distances |R_k - R_j|.
    cos_theta : (m,) array
        Cosine of the angle at the central atom.
    """
    center: int
    neighbors: np.ndarray
    displacements: np.ndarray
    distances: np.ndarray
    triplets: np.ndarray
    rjk_vec: np.ndarray
    rjk: np.ndarray
    cos_theta: np.ndarray

    @classmethod
    def build(cls, center, neighbors, displacements, cutoff,
              outer_cutoff=None, on_violation='raise'):
        """
        Build the environment from a full neighbor list.

        Neighbors at distances >= cutoff are silently dropped; the host's
        neighbor list is expected to extend to an outer cutoff.

        Args:
          center (int): index of the central atom
          neighbors: sequence of neighbor atom indices
          displacements: (n, 3) displacement vectors R_j - R_i
          cutoff (float): potential cutoff radius
          outer_cutoff (float): cutoff of the host's neighbor list; if
            given, neighbors beyond it violate the host contract
          on_violation (str): 'raise' to raise RuntimeInvariantViolation,
            'skip' to drop the offending neighbor with a warning

        """
        if on_violation not in ON_VIOLATION:
            raise ConfigurationError(
                "on_violation must be one of {}, got '{}'".format(
                    ON_VIOLATION, on_violation))
        neighbors = np.asarray(neighbors, dtype=int).reshape(-1)
        displacements = np.asarray(
            displacements, dtype=float).reshape(-1, 3)
        if len(neighbors) != len(displacements):
            raise RuntimeInvariantViolation(
                "Atom {}: {} neighbor indices but {} displacement "
                "vectors.".format(center, len(neighbors),
                                  len(displacements)))
        distances = np.sqrt(np.sum(displacements**2, axis=1))

        bad = ~np.isfinite(distances) | (distances == 0.0)
        if outer_cutoff is not None:
            bad |= distances > outer_cutoff
        if np.any(bad):
            msg = ("Atom {}: neighbor(s) {} have zero, non-finite, or "
                   "beyond-cutoff distances {}.".format(
                       center, neighbors[bad].tolist(),
                       distances[bad].tolist()))
            if on_violation == 'raise':
                raise RuntimeInvariantViolation(msg)
            warnings.warn(msg + " Skipped.")

        keep = ~bad & (distances < cutoff)
        neighbors = neighbors[keep]
        displacements = displacements[keep]
        distances = distances[keep]

        p, q = np.triu_indices(len(neighbors), k=1)
        triplets = np.column_stack([p, q]).astype(int).reshape(-1, 2)
        rjk_vec = displacements[q] - displacements[p]
        rjk = np.sqrt(np.sum(rjk_vec**2, axis=1))
        cos_theta = (np.sum(displacements[p]*displacements[q], axis=1)
                     / (distances[p]*distances[q]))
        cos_theta = np.clip(cos_theta, -1.0, 1.0)

        return cls(center=int(center), neighbors=neighbors,
                   displacements=displacements, distances=distances,
                   triplets=triplets, rjk_vec=rjk_vec.reshape(-1, 3),
                   rjk=rjk, cos_theta=cos_theta)

    @property
    def num_pairs(self) -> int:
        return len(self.neighbors)

    @property
    def num_triplets(self) -> int:
        return len(self.triplets)

    def pairs(self):
        """Iterate over the retained pairs in iteration order."""
        for p in range(self.num_pairs):
            yield Pair(int(self.neighbors[p]), self.displacements[p],
                       float(self.distances[p]))

    def triplet_partners(self, p):
        """
        Atom indices k of all triplets (i, j, k) for the pair p = (i, j),
        i.e., of all later neighbors in iteration order.

        """
        selected = self.triplets[:, 0] == p
        return self.neighbors[self.triplets[selected, 1]]

    def triplet_geometry(self) -> TripletGeometry:
        p = self.triplets[:, 0]
        q = self.triplets[:, 1]
        return TripletGeometry(
            rij_vec=self.displacements[p], rik_vec=self.displacements[q],
            rjk_vec=self.rjk_vec, rij=self.distances[p],
            rik=self.distances[q], rjk=self.rjk, cos_theta=self.cos_theta)
