"""
Radial and angular symmetry functions (atom-centered descriptors).

References
----------
    J. Behler, J. Chem. Phys. 134 (2011) 074106

The radial function G2 depends on one pair distance.  The angular
functions G4 (three-sided) and G5 (two-sided) depend on the two bond
vectors from the central atom i to neighbors j and k and, for G4, on
the distance between j and k.

All functions are vectorized: descriptor parameters can be passed as
column arrays of shape (n, 1) and geometric quantities as arrays of
shape (m,), giving results of shape (n, m) (and (n, m, 3) for
gradients).

"""

from collections import namedtuple
from dataclasses import dataclass
from typing import ClassVar, Iterable, Sequence, Tuple

import numpy as np

from .cutoff import cutoff_function, cutoff_derivative
from .exceptions import ConfigurationError

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

ANGULAR_FORMS = ('g4', 'g5')

# Geometry of a batch of triplets (i, j, k) centered at atom i; vectors
# point from i to j (rij_vec), from i to k (rik_vec), and from j to k
# (rjk_vec).
TripletGeometry = namedtuple(
    "TripletGeometry",
    ["rij_vec", "rik_vec", "rjk_vec", "rij", "rik", "rjk", "cos_theta"])


@dataclass(frozen=True)
class RadialDescriptor:
    """
    Radial symmetry function G2 with parameters (eta, Rc, Rs).

    """
    eta: float
    cutoff: float
    shift: float

    num_parameters: ClassVar[int] = 3

    @property
    def parameters(self) -> Tuple[float, float, float]:
        return (self.eta, self.cutoff, self.shift)


@dataclass(frozen=True)
class AngularDescriptor:
    """
    Angular symmetry function (G4 or G5) with parameters
    (eta, Rc, zeta, lambda).

    """
    eta: float
    cutoff: float
    zeta: float
    lambda_: float

    num_parameters: ClassVar[int] = 4

    @property
    def parameters(self) -> Tuple[float, float, float, float]:
        return (self.eta, self.cutoff, self.zeta, self.lambda_)


def descriptor_from_parameters(values: Sequence[float]):
    """
    Create a descriptor from a row of the parameter table.  The number
    of parameters selects the type: 3 values are a radial descriptor
    (eta, Rc, Rs), 4 values an angular descriptor (eta, Rc, zeta,
    lambda).

    Raises:
      ConfigurationError: for any other number of values or for
        unphysical parameters

    """
    values = [float(v) for v in values]
    if len(values) == RadialDescriptor.num_parameters:
        descriptor = RadialDescriptor(*values)
    elif len(values) == AngularDescriptor.num_parameters:
        descriptor = AngularDescriptor(*values)
        # the derivative diverges at 1 + lambda*cos = 0 for zeta < 1
        if descriptor.zeta < 1.0:
            raise ConfigurationError(
                "Angular descriptor requires zeta >= 1: {}".format(values))
    else:
        raise ConfigurationError(
            "Symmetry function with {} parameters; expected 3 (radial) "
            "or 4 (angular): {}".format(len(values), values))
    if descriptor.cutoff <= 0.0:
        raise ConfigurationError(
            "Symmetry function cutoff must be positive: {}".format(values))
    return descriptor


class DescriptorSet(object):
    """
    Ordered, immutable set of symmetry functions.  Slot s of every
    feature vector corresponds to descriptor s.

    The parameters of the radial and angular descriptors are also
    stored as read-only column arrays for vectorized evaluation.

    """

    def __init__(self, descriptors: Iterable):
        self._descriptors = tuple(descriptors)
        for d in self._descriptors:
            if not isinstance(d, (RadialDescriptor, AngularDescriptor)):
                raise ConfigurationError(
                    "Not a symmetry function descriptor: {}".format(d))

        self.radial_slots = np.array(
            [i for i, d in enumerate(self._descriptors)
             if isinstance(d, RadialDescriptor)], dtype=int)
        self.angular_slots = np.array(
            [i for i, d in enumerate(self._descriptors)
             if isinstance(d, AngularDescriptor)], dtype=int)

        radial = np.array([self._descriptors[i].parameters
                           for i in self.radial_slots]).reshape(-1, 3)
        angular = np.array([self._descriptors[i].parameters
                            for i in self.angular_slots]).reshape(-1, 4)
        # (n, 1) columns broadcast against (m,) rows of distances
        (self.radial_eta, self.radial_cutoff, self.radial_shift
         ) = [self._column(c) for c in radial.T]
        (self.angular_eta, self.angular_cutoff, self.angular_zeta,
         self.angular_lambda) = [self._column(c) for c in angular.T]

    @staticmethod
    def _column(values):
        column = np.array(values, dtype=float).reshape(-1, 1)
        column.setflags(write=False)
        return column

    @classmethod
    def from_parameters(cls, rows: Iterable[Sequence[float]]):
        return cls([descriptor_from_parameters(row) for row in rows])

    def __len__(self):
        return len(self._descriptors)

    def __iter__(self):
        return iter(self._descriptors)

    def __getitem__(self, i):
        return self._descriptors[i]

    def __eq__(self, other):
        if not isinstance(other, DescriptorSet):
            return NotImplemented
        return self._descriptors == other._descriptors

    def __str__(self):
        out = "DescriptorSet: {} symmetry functions ".format(len(self))
        out += "({} radial, {} angular)".format(
            self.num_radial, self.num_angular)
        return out

    @property
    def num_radial(self):
        return len(self.radial_slots)

    @property
    def num_angular(self):
        return len(self.angular_slots)

    @property
    def max_cutoff(self):
        if len(self) == 0:
            return 0.0
        return max(d.cutoff for d in self._descriptors)


def g2(r, eta, rc, rs):
    """
    G2 = exp(-eta*(r - Rs)^2)*fc(r)

    """
    return np.exp(-eta*(r - rs)**2)*cutoff_function(r, rc)


def dg2_dr(r, eta, rc, rs):
    """
    Radial derivative of G2:

    dG2/dr = exp(-eta*(r - Rs)^2)*[2*eta*(Rs - r)*fc(r) + dfc/dr]

    """
    return np.exp(-eta*(r - rs)**2)*(
        2.0*eta*(rs - r)*cutoff_function(r, rc) + cutoff_derivative(r, rc))


def _angular_part(cos_theta, zeta, lambda_):
    """
    Return 2^(1-zeta)*(1 + lambda*cos)^zeta and its derivative with
    respect to cos(theta).

    """
    base = np.maximum(1.0 + lambda_*cos_theta, 0.0)
    prefactor = 2.0**(1.0 - zeta)
    value = prefactor*base**zeta
    derivative = prefactor*zeta*lambda_*base**(zeta - 1.0)
    return value, derivative


def g4(rij, rik, rjk, cos_theta, eta, rc, zeta, lambda_):
    """
    G4 = 2^(1-zeta)*(1 + lambda*cos)^zeta
         * exp(-eta*(rij^2 + rik^2 + rjk^2))
         * fc(rij)*fc(rik)*fc(rjk)

    The j-k cutoff uses the hard-cut convention.

    """
    angular, _ = _angular_part(cos_theta, zeta, lambda_)
    radial = np.exp(-eta*(rij**2 + rik**2 + rjk**2))
    fc = (cutoff_function(rij, rc, cut=False)
          * cutoff_function(rik, rc, cut=False)
          * cutoff_function(rjk, rc))
    inside = (rij < rc) & (rik < rc)
    return np.where(inside, angular*radial*fc, 0.0)


def g5(rij, rik, cos_theta, eta, rc, zeta, lambda_):
    """
    G5 = 2^(1-zeta)*(1 + lambda*cos)^zeta
         * exp(-eta*(rij^2 + rik^2))*fc(rij)*fc(rik)

    """
    angular, _ = _angular_part(cos_theta, zeta, lambda_)
    radial = np.exp(-eta*(rij**2 + rik**2))
    fc = (cutoff_function(rij, rc, cut=False)
          * cutoff_function(rik, rc, cut=False))
    inside = (rij < rc) & (rik < rc)
    return np.where(inside, angular*radial*fc, 0.0)


def angular_function(form, geometry, eta, rc, zeta, lambda_):
    """
    Evaluate G4 or G5 for a batch of triplets.

    Args:
      form: 'g4' or 'g5'
      geometry: TripletGeometry

    """
    if form == 'g4':
        return g4(geometry.rij, geometry.rik, geometry.rjk,
                  geometry.cos_theta, eta, rc, zeta, lambda_)
    elif form == 'g5':
        return g5(geometry.rij, geometry.rik, geometry.cos_theta,
                  eta, rc, zeta, lambda_)
    raise ConfigurationError("Unknown angular symmetry function: "
                             "'{}'".format(form))


def angular_gradients(form, geometry, eta, rc, zeta, lambda_):
    """
    Gradient of G4 or G5 with respect to the positions of the two
    neighbors j and k.  The gradient with respect to the central atom
    is -(dG/dRj + dG/dRk), since G only depends on relative positions.

    With cos = rij_vec.rik_vec/(rij*rik):

      dcos/dRj = rik_vec/(rij*rik) - cos*rij_vec/rij^2
      dcos/dRk = rij_vec/(rij*rik) - cos*rik_vec/rik^2

    and the radial factors are differentiated through
    d|rij|/dRj = rij_vec/rij, d|rjk|/dRj = -rjk_vec/rjk,
    d|rjk|/dRk = rjk_vec/rjk.

    Args:
      form: 'g4' or 'g5'
      geometry: TripletGeometry with arrays of shape (m,) and (m, 3)
      eta, rc, zeta, lambda_: descriptor parameters, scalars or (n, 1)

    Returns:
      tuple (dG/dRj, dG/dRk), each of shape (n, m, 3)

    """
    if form not in ANGULAR_FORMS:
        raise ConfigurationError("Unknown angular symmetry function: "
                                 "'{}'".format(form))
    rij = np.asarray(geometry.rij, dtype=float)
    rik = np.asarray(geometry.rik, dtype=float)
    cos_theta = np.asarray(geometry.cos_theta, dtype=float)
    rij_vec = np.asarray(geometry.rij_vec, dtype=float)
    rik_vec = np.asarray(geometry.rik_vec, dtype=float)

    angular, dangular = _angular_part(cos_theta, zeta, lambda_)
    fc_ij = cutoff_function(rij, rc, cut=False)
    fc_ik = cutoff_function(rik, rc, cut=False)
    dfc_ij = cutoff_derivative(rij, rc, cut=False)
    dfc_ik = cutoff_derivative(rik, rc, cut=False)

    if form == 'g4':
        rjk = np.asarray(geometry.rjk, dtype=float)
        radial = np.exp(-eta*(rij**2 + rik**2 + rjk**2))
        fc_jk = cutoff_function(rjk, rc)
        dfc_jk = cutoff_derivative(rjk, rc)
    else:
        radial = np.exp(-eta*(rij**2 + rik**2))
        fc_jk = 1.0
        dfc_jk = 0.0

    g = angular*radial*fc_ij*fc_ik*fc_jk
    dg_dcos = dangular*radial*fc_ij*fc_ik*fc_jk
    ar = angular*radial

    cross = dg_dcos/(rij*rik)
    coeff_jj = (-dg_dcos*cos_theta/rij**2 - 2.0*eta*g
                + ar*dfc_ij*fc_ik*fc_jk/rij)
    coeff_kk = (-dg_dcos*cos_theta/rik**2 - 2.0*eta*g
                + ar*fc_ij*dfc_ik*fc_jk/rik)
    if form == 'g4':
        jk_term = ar*fc_ij*fc_ik*dfc_jk/rjk
        coeff_j_jk = 2.0*eta*g - jk_term
        coeff_k_jk = -2.0*eta*g + jk_term
    else:
        coeff_j_jk = np.zeros_like(g)
        coeff_k_jk = np.zeros_like(g)

    inside = (rij < rc) & (rik < rc)
    cross, coeff_jj, coeff_kk, coeff_j_jk, coeff_k_jk = [
        np.where(inside, c, 0.0)[..., np.newaxis]
        for c in (cross, coeff_jj, coeff_kk, coeff_j_jk, coeff_k_jk)]

    dg_drj = coeff_jj*rij_vec + cross*rik_vec
    dg_drk = coeff_kk*rik_vec + cross*rij_vec
    if form == 'g4':
        rjk_vec = np.asarray(geometry.rjk_vec, dtype=float)
        dg_drj = dg_drj + coeff_j_jk*rjk_vec
        dg_drk = dg_drk + coeff_k_jk*rjk_vec
    return dg_drj, dg_drk
