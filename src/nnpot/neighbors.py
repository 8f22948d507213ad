"""
Full neighbor lists for isolated structures and orthorhombic periodic
boxes, built with a k-d tree.

"""

from typing import List

import numpy as np
from scipy.spatial import cKDTree

from .exceptions import ConfigurationError
from .potential import AtomView

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


def build_neighbor_lists(positions, cutoff: float,
                         box=None) -> List[AtomView]:
    """
    Find all neighbors within the cutoff radius of each atom.

    Args:
      positions: (N, 3) Cartesian coordinates
      cutoff: neighbor list cutoff radius
      box: (optional) edge lengths (a, b, c) of an orthorhombic periodic
        box; if None, the structure is treated as isolated

    Returns:
      list with one AtomView(index, neighbors, displacements) per atom;
      neighbors of each atom are sorted by index, displacements point
      from the atom to its neighbors (minimum image if periodic)

    Raises:
      ConfigurationError: if the cutoff is not positive or not smaller
        than half of the shortest box edge

    """
    positions = np.asarray(positions, dtype=float).reshape(-1, 3)
    natoms = len(positions)
    if cutoff <= 0.0:
        raise ConfigurationError(
            "Neighbor list cutoff must be positive, got {}".format(cutoff))
    if natoms == 0:
        return []

    if box is None:
        tree = cKDTree(positions)
    else:
        box = np.asarray(box, dtype=float).reshape(-1)
        if box.shape != (3,) or np.any(box <= 0.0):
            raise ConfigurationError(
                "Box must be three positive edge lengths: {}".format(box))
        if np.any(cutoff >= 0.5*box):
            raise ConfigurationError(
                "Cutoff {} is not smaller than half of the box edges {}; "
                "use a larger box.".format(cutoff, box.tolist()))
        wrapped = np.mod(positions, box)
        # np.mod can round up to the box length
        wrapped = np.where(wrapped >= box, 0.0, wrapped)
        tree = cKDTree(wrapped, boxsize=box)

    pairs = tree.query_pairs(cutoff, output_type='ndarray').reshape(-1, 2)
    i, j = pairs[:, 0], pairs[:, 1]
    d = positions[j] - positions[i]
    if box is not None:
        d -= box*np.round(d/box)

    # both directions of every pair
    centers = np.concatenate([i, j])
    others = np.concatenate([j, i])
    vectors = np.concatenate([d, -d])
    order = np.lexsort((others, centers))
    centers, others, vectors = centers[order], others[order], vectors[order]

    bounds = np.cumsum(np.bincount(centers, minlength=natoms))[:-1]
    neighbor_lists = []
    for index, (nbl, vec) in enumerate(zip(np.split(others, bounds),
                                           np.split(vectors, bounds))):
        neighbor_lists.append(AtomView(index, nbl, vec.reshape(-1, 3)))
    return neighbor_lists
