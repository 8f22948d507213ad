"""
Encode atomic environments as symmetry-function feature vectors.

"""

import numpy as np

from .environment import AtomicEnvironment
from .exceptions import ConfigurationError
from .symmetry import ANGULAR_FORMS, DescriptorSet, g2, angular_function

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


class FeatureEncoder(object):
    """
    Map an AtomicEnvironment to a feature vector with one slot per
    symmetry function.

    Radial slots receive one contribution per retained pair, angular
    slots one contribution per unordered triplet.  Atoms with fewer
    than two neighbors have zero angular features, atoms without
    neighbors have an all-zero feature vector (before centering).

    Args:
      descriptors (DescriptorSet): symmetry function set
      angular_form (str): 'g4' or 'g5'
      mean: optional per-slot means that are subtracted from every
        feature vector

    """

    def __init__(self, descriptors: DescriptorSet, angular_form='g5',
                 mean=None):
        if angular_form not in ANGULAR_FORMS:
            raise ConfigurationError(
                "angular_form must be one of {}, got '{}'".format(
                    ANGULAR_FORMS, angular_form))
        self.descriptors = descriptors
        self.angular_form = angular_form
        if mean is not None:
            mean = np.array(mean, dtype=float).reshape(-1)
            if len(mean) != len(descriptors):
                raise ConfigurationError(
                    "{} feature means for {} symmetry functions.".format(
                        len(mean), len(descriptors)))
            mean.setflags(write=False)
        self.mean = mean

    @property
    def num_features(self):
        return len(self.descriptors)

    @property
    def centered(self):
        return self.mean is not None

    def raw_features(self, env: AtomicEnvironment):
        """
        Feature vector without centering.

        """
        d = self.descriptors
        features = np.zeros(len(d))
        if d.num_radial > 0 and env.num_pairs > 0:
            values = g2(env.distances, d.radial_eta, d.radial_cutoff,
                        d.radial_shift)
            features[d.radial_slots] = np.sum(values, axis=1)
        if d.num_angular > 0 and env.num_triplets > 0:
            values = angular_function(
                self.angular_form, env.triplet_geometry(), d.angular_eta,
                d.angular_cutoff, d.angular_zeta, d.angular_lambda)
            features[d.angular_slots] = np.sum(values, axis=1)
        return features

    def encode(self, env: AtomicEnvironment):
        """
        Feature vector that is passed to the network, i.e., centered
        if feature means are available.

        """
        features = self.raw_features(env)
        if self.mean is not None:
            features -= self.mean
        return features
