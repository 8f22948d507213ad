"""
Forces must be the negative gradient of the total energy and obey
action-reaction.

"""

import numpy as np
import pytest

from ..encoder import FeatureEncoder
from ..environment import AtomicEnvironment
from ..forces import ForceAssembler, voigt
from ..host import evaluate_structure, finite_difference_forces
from ..loader import write_potential
from ..potential import NNPotential
from ..symmetry import DescriptorSet
from .conftest import CUTOFF, random_network


def environment_of(positions, center):
    others = [i for i in range(len(positions)) if i != center]
    return AtomicEnvironment.build(
        center, others, positions[others] - positions[center], CUTOFF)


class TestForceAssembler:

    @pytest.mark.parametrize("form", ['g4', 'g5'])
    def test_feature_gradients(self, descriptors, cluster, form):
        """
        With a unit gradient for slot s the neighbor forces are
        -dG_s/dR_j.

        """
        encoder = FeatureEncoder(descriptors, angular_form=form)
        assembler = ForceAssembler(descriptors, angular_form=form)
        env = environment_of(cluster, 0)
        h = 1.0e-6
        for s in range(len(descriptors)):
            gradient = np.zeros(len(descriptors))
            gradient[s] = 1.0
            forces = assembler.assemble(env, gradient)
            for p, j in enumerate(env.neighbors):
                for x in range(3):
                    positions = cluster.copy()
                    positions[j, x] += h
                    g_plus = encoder.raw_features(
                        environment_of(positions, 0))[s]
                    positions[j, x] -= 2*h
                    g_minus = encoder.raw_features(
                        environment_of(positions, 0))[s]
                    numerical = -(g_plus - g_minus)/(2*h)
                    assert forces.neighbor_forces[p, x] == pytest.approx(
                        numerical, abs=1e-7)

    def test_zero_gradient(self, descriptors, cluster):
        assembler = ForceAssembler(descriptors)
        forces = assembler.assemble(environment_of(cluster, 0),
                                    np.zeros(len(descriptors)))
        assert np.all(forces.neighbor_forces == 0.0)
        assert np.all(forces.center_force == 0.0)

    def test_action_reaction(self, descriptors, cluster):
        assembler = ForceAssembler(descriptors, angular_form='g4')
        rng = np.random.default_rng(5)
        for center in range(len(cluster)):
            forces = assembler.assemble(environment_of(cluster, center),
                                        rng.normal(size=len(descriptors)))
            assert np.allclose(forces.net_force, 0.0, atol=1e-12)

    def test_no_neighbors(self, descriptors):
        assembler = ForceAssembler(descriptors)
        env = AtomicEnvironment.build(0, [], np.zeros((0, 3)), CUTOFF)
        forces = assembler.assemble(env, np.ones(len(descriptors)))
        assert forces.neighbor_forces.shape == (0, 3)
        assert np.all(forces.center_force == 0.0)
        assert np.all(forces.virial == 0.0)

    def test_gradient_length(self, descriptors, cluster):
        assembler = ForceAssembler(descriptors)
        with pytest.raises(ValueError):
            assembler.assemble(environment_of(cluster, 0), np.ones(2))


class TestTotalForces:

    def test_trimer_finite_difference(self, potential, trimer):
        sink = evaluate_structure(potential, trimer)
        reference = finite_difference_forces(potential, trimer, delta=1e-5)
        assert np.allclose(sink.forces, reference, rtol=0.0, atol=1e-5)

    def test_cluster_finite_difference(self, potential, cluster):
        sink = evaluate_structure(potential, cluster)
        reference = finite_difference_forces(potential, cluster, delta=1e-5)
        assert np.allclose(sink.forces, reference, rtol=0.0, atol=1e-5)

    def test_net_force_vanishes(self, potential, cluster):
        sink = evaluate_structure(potential, cluster)
        assert np.allclose(np.sum(sink.forces, axis=0), 0.0, atol=1e-10)

    def test_virial(self, potential, cluster):
        sink = evaluate_structure(potential, cluster)
        expected = voigt(cluster.T @ sink.forces)
        assert np.allclose(sink.virial, expected, atol=1e-10)

    def test_energy_is_sum_of_atomic_energies(self, potential, trimer):
        sink = evaluate_structure(potential, trimer)
        assert sink.energy == pytest.approx(np.sum(sink.per_atom_energy))

    def test_net_torque_vanishes(self, potential, cluster):
        sink = evaluate_structure(potential, cluster)
        torque = np.sum(np.cross(cluster, sink.forces), axis=0)
        assert np.allclose(torque, 0.0, atol=1e-10)

    @pytest.mark.parametrize("form", ['g4', 'g5'])
    def test_collinear_triplet(self, tmp_path, form):
        # 1 + lambda*cos(theta) = 0 at the central atom
        descriptors = DescriptorSet.from_parameters(
            [[0.5, 4.0, 0.0], [0.1, 4.0, 1.0, 1.0]])
        write_potential(tmp_path, random_network(len(descriptors)),
                        descriptors)
        potential = NNPotential.from_directory(tmp_path, CUTOFF,
                                               angular_form=form)
        positions = np.array([[0.0, 0.0, 0.0],
                              [1.5, 0.0, 0.0],
                              [-1.5, 0.0, 0.0]])
        sink = evaluate_structure(potential, positions)
        assert np.all(np.isfinite(sink.forces))
        reference = finite_difference_forces(potential, positions)
        assert np.allclose(sink.forces, reference, rtol=0.0, atol=1e-5)
