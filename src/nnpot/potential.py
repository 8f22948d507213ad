"""
Neural-network interatomic potential.

The host (an MD engine or one of the helpers in ``nnpot.host``)
only talks to the ``Potential`` interface:

    potential.configure(params)
    result = potential.compute_step(AtomView(i, neighbors, displacements))

and adds ``result.energy`` and the forces in ``result`` to its own
accumulators.  Each call works on its own local data; the potential
object is not modified by an evaluation and can be shared.

"""

from abc import ABC, abstractmethod
from collections import namedtuple
from collections.abc import Mapping
from dataclasses import dataclass
import os
import warnings

import numpy as np

from . import config as cfg
from .encoder import FeatureEncoder
from .environment import AtomicEnvironment, ON_VIOLATION
from .exceptions import (ConfigurationError, UsageError,
                         ExtrapolationWarning)
from .forces import ForceAssembler, ForceContribution
from .loader import PotentialFiles, load_potential
from .symmetry import ANGULAR_FORMS

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

# What the host supplies for one central atom: its index, the indices
# of its neighbors, and the displacement vectors R_j - R_i.
AtomView = namedtuple("AtomView", ["index", "neighbors", "displacements"])


@dataclass(eq=False)
class AtomResult:
    """
    Energy and forces due to one central atom.

    Attributes
    ----------
    index : int
        Index of the central atom.
    energy : float
        Atomic energy.
    features : (n,) array
        Network input (centered if feature means are available).
    forces : ForceContribution
        Forces on the central atom and its neighbors and the virial.
    extrapolated : (k,) int array
        Feature slots outside of the training range (empty if none or
        if no min/max table is available).
    """
    index: int
    energy: float
    features: np.ndarray
    forces: ForceContribution
    extrapolated: np.ndarray

    @property
    def center_force(self):
        return self.forces.center_force

    @property
    def neighbors(self):
        return self.forces.neighbors

    @property
    def neighbor_forces(self):
        return self.forces.neighbor_forces

    @property
    def virial(self):
        return self.forces.virial


class Potential(ABC):
    """
    Interface between an interatomic potential and its host.

    """

    @property
    @abstractmethod
    def cutoff(self) -> float:
        """Interaction cutoff radius."""
        raise NotImplementedError

    @abstractmethod
    def configure(self, params):
        """
        Set up the potential.  Must be called before compute_step().

        """
        raise NotImplementedError

    @abstractmethod
    def compute_step(self, atom_view: AtomView) -> AtomResult:
        """
        Energy and forces due to one central atom.

        """
        raise NotImplementedError

    def compute_environment(self, env: AtomicEnvironment) -> AtomResult:
        """
        Energy and forces for an already built environment.  Potentials
        that build an AtomicEnvironment in compute_step() override this.

        """
        raise NotImplementedError(
            "{} does not evaluate prebuilt environments.".format(
                self.__class__.__name__))


class NNPotential(Potential):
    """
    Single-species neural-network potential with symmetry-function
    descriptors.

    Parameters
    ----------
    files : PotentialFiles, optional
        Loaded potential files.  If None, configure() has to be called.
    cutoff : float, optional
        Cutoff radius; required together with `files`.
    angular_form : str, optional
        Angular symmetry function, 'g4' or 'g5'.  Default: 'g5'
    outer_cutoff : float, optional
        Cutoff of the host's neighbor lists.  If set, neighbors beyond it
        are treated as a violation of the host contract.  Default: None
    on_violation : str, optional
        'raise' (default) or 'skip' for geometric invariant violations.
    check_extrapolation : bool, optional
        Warn about inputs outside of the training range when a min/max
        table is available.  Default: True
    """

    def __init__(self, files: PotentialFiles = None, cutoff: float = None,
                 angular_form: str = 'g5', outer_cutoff: float = None,
                 on_violation: str = 'raise',
                 check_extrapolation: bool = True):
        if angular_form not in ANGULAR_FORMS:
            raise ConfigurationError(
                "angular_form must be one of {}, got '{}'".format(
                    ANGULAR_FORMS, angular_form))
        if on_violation not in ON_VIOLATION:
            raise ConfigurationError(
                "on_violation must be one of {}, got '{}'".format(
                    ON_VIOLATION, on_violation))
        self.angular_form = angular_form
        self.outer_cutoff = outer_cutoff
        self.on_violation = on_violation
        self.check_extrapolation = check_extrapolation
        self._cutoff = None
        self.files = None
        self.encoder = None
        self.assembler = None
        if files is not None:
            self._setup(files, cutoff)
        elif cutoff is not None:
            raise ConfigurationError(
                "A cutoff was given without potential files.")

    @classmethod
    def from_directory(cls, path: os.PathLike, cutoff: float,
                       verbose: bool = False, **kwargs):
        """
        Load a potential directory (see nnpot.loader).  Keyword
        arguments are passed on to the constructor.

        """
        return cls(load_potential(path, verbose=verbose), cutoff, **kwargs)

    @classmethod
    def from_config(cls, config_file: os.PathLike = None, **kwargs):
        """
        Create the potential from the 'potential' settings of the
        configuration file.  Keyword arguments override settings.

        """
        settings = cfg.read('potential', config_file=config_file)
        settings.update(kwargs)
        if settings['path'] is None or settings['cutoff'] is None:
            raise ConfigurationError(
                "The configuration does not specify the potential path "
                "and cutoff.  Configure with `nnpot config`.")
        return cls.from_directory(
            settings['path'], float(settings['cutoff']),
            angular_form=settings['angular_form'],
            outer_cutoff=settings['outer_cutoff'],
            on_violation=settings['on_violation'],
            check_extrapolation=settings['check_extrapolation'])

    def _setup(self, files: PotentialFiles, cutoff):
        try:
            cutoff = float(cutoff)
        except (TypeError, ValueError):
            raise ConfigurationError("Invalid cutoff: {}".format(cutoff))
        if cutoff <= 0.0:
            raise ConfigurationError(
                "The cutoff must be positive, got {}".format(cutoff))
        if self.outer_cutoff is not None and self.outer_cutoff < cutoff:
            raise ConfigurationError(
                "The outer cutoff ({}) is smaller than the potential "
                "cutoff ({}).".format(self.outer_cutoff, cutoff))
        if files.network.num_inputs != len(files.descriptors):
            raise ConfigurationError(
                "Network has {} inputs but {} symmetry functions are "
                "defined.".format(files.network.num_inputs,
                                  len(files.descriptors)))
        if files.descriptors.max_cutoff > cutoff:
            warnings.warn(
                "Symmetry function cutoffs up to {} exceed the potential "
                "cutoff {}; neighbors beyond {} are ignored.".format(
                    files.descriptors.max_cutoff, cutoff, cutoff))
        self.files = files
        self._cutoff = cutoff
        self.encoder = FeatureEncoder(files.descriptors,
                                      angular_form=self.angular_form,
                                      mean=files.mean)
        self.assembler = ForceAssembler(files.descriptors,
                                        angular_form=self.angular_form)

    def __str__(self):
        out = "NNPotential:\n"
        if not self.configured:
            return out + "  (not configured)\n"
        out += "  Path            : {}\n".format(self.files.path)
        out += "  Cutoff          : {}\n".format(self.cutoff)
        out += "  Angular form    : {}\n".format(self.angular_form)
        out += "  Descriptors     : {}\n".format(self.descriptors)
        out += "  Centered inputs : {}\n".format(self.encoder.centered)
        out += "  Min/max table   : {}\n".format(
            self.files.minmax is not None)
        out += str(self.network)
        return out

    @property
    def configured(self):
        return self.files is not None

    @property
    def cutoff(self):
        return self._cutoff

    @property
    def network(self):
        return self.files.network

    @property
    def descriptors(self):
        return self.files.descriptors

    def settings(self, args):
        """
        Global settings of the potential.  There are none, so `args`
        must be empty.

        """
        if len(args) != 0:
            raise UsageError("The potential takes no global settings",
                             argument=args[0])

    def configure(self, params):
        """
        Load potential files and set the cutoff.

        Args:
          params: either a sequence ['*', '*', <directory>, <cutoff>]
            (coefficients for all type pairs) or a mapping with keys
            'path' and 'cutoff'

        Raises:
          UsageError: if the arguments are malformed
          ConfigurationError: if the potential files are invalid

        """
        if isinstance(params, Mapping):
            for key in ('path', 'cutoff'):
                if key not in params:
                    raise UsageError("Missing potential parameter",
                                     argument=key)
            path, cutoff = params['path'], params['cutoff']
        else:
            args = list(params)
            if len(args) != 4:
                raise UsageError(
                    "Expected 4 coefficient arguments "
                    "(* * <directory> <cutoff>), got {}".format(len(args)))
            for arg in args[:2]:
                if arg != '*':
                    raise UsageError("Type selectors must both be '*'",
                                     argument=arg)
            path, cutoff = args[2], args[3]
        try:
            cutoff = float(cutoff)
        except (TypeError, ValueError):
            raise UsageError("Cutoff is not a number", argument=cutoff)
        self._setup(load_potential(path), cutoff)

    def _require_configured(self):
        if not self.configured:
            raise ConfigurationError(
                "The potential has not been configured.")

    def build_environment(self, atom_view: AtomView) -> AtomicEnvironment:
        self._require_configured()
        return AtomicEnvironment.build(
            atom_view.index, atom_view.neighbors, atom_view.displacements,
            self.cutoff, outer_cutoff=self.outer_cutoff,
            on_violation=self.on_violation)

    def extrapolated_slots(self, features):
        """
        Feature slots outside of the [min, max] range of the training
        set.  Empty if no min/max table is available.

        """
        minmax = self.files.minmax
        if minmax is None:
            return np.zeros(0, dtype=int)
        outside = (features < minmax[:, 0]) | (features > minmax[:, 1])
        return np.flatnonzero(outside)

    def compute_environment(self, env: AtomicEnvironment) -> AtomResult:
        """
        Encode the environment, evaluate the network, and assemble the
        forces.

        """
        self._require_configured()
        features = self.encoder.encode(env)
        energy, gradient = self.network.evaluate(features)
        forces = self.assembler.assemble(env, gradient)
        extrapolated = self.extrapolated_slots(features)
        if self.check_extrapolation and len(extrapolated) > 0:
            warnings.warn(
                "Atom {}: extrapolation in symmetry function(s) {}".format(
                    env.center, extrapolated.tolist()),
                ExtrapolationWarning)
        return AtomResult(index=env.center, energy=energy,
                          features=features, forces=forces,
                          extrapolated=extrapolated)

    def compute_step(self, atom_view: AtomView) -> AtomResult:
        return self.compute_environment(self.build_environment(atom_view))
