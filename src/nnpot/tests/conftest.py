"""
Shared fixtures: a small random potential and a few atomic clusters.

"""

import numpy as np
import pytest

from ..loader import write_potential
from ..network import FeedForwardNetwork
from ..potential import NNPotential
from ..symmetry import DescriptorSet

CUTOFF = 4.0

PARAMETERS = [
    [0.5, 4.0, 0.0],
    [1.0, 4.0, 1.5],
    [0.05, 4.0, 1.0, 1.0],
    [0.2, 3.5, 2.0, -1.0],
    [0.3, 3.0, 0.0],
]


def random_network(num_inputs, nodes=5, layers=2, activation='tanh',
                   seed=42):
    rng = np.random.default_rng(seed)
    sizes = [num_inputs] + [nodes]*layers + [1]
    weights = [0.5*rng.normal(size=(sizes[k], sizes[k + 1]))
               for k in range(len(sizes) - 1)]
    biases = [0.1*rng.normal(size=sizes[k + 1])
              for k in range(len(sizes) - 1)]
    return FeedForwardNetwork(weights, biases, activation=activation)


@pytest.fixture
def descriptors():
    return DescriptorSet.from_parameters(PARAMETERS)


@pytest.fixture
def network(descriptors):
    return random_network(len(descriptors))


@pytest.fixture
def potential_dir(tmp_path, network, descriptors):
    path = tmp_path / "potential"
    write_potential(path, network, descriptors)
    return path


@pytest.fixture(params=['g4', 'g5'])
def potential(request, network, descriptors, potential_dir):
    return NNPotential.from_directory(potential_dir, CUTOFF,
                                      angular_form=request.param)


@pytest.fixture
def trimer():
    """Three atoms, all within the cutoff of each other."""
    return np.array([[0.0, 0.0, 0.0],
                     [1.1, 0.2, 0.0],
                     [0.3, 1.3, 0.4]])


@pytest.fixture
def cluster():
    """Seven atoms; some pairs are beyond the cutoff."""
    return np.array([[0.0, 0.0, 0.0],
                     [1.2, 0.3, -0.1],
                     [-0.4, 1.5, 0.2],
                     [0.5, -0.6, 1.3],
                     [2.9, 1.1, 0.7],
                     [-2.2, -1.4, -0.5],
                     [4.6, 0.2, 0.1]])
