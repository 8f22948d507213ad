#!/usr/bin/env python3

import numpy as np

from nnpot.commandline.tools import NNPotToolABC
from nnpot import formats
from nnpot.host import evaluate_structure, finite_difference_forces

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


class Check(NNPotToolABC):
    """
    Validate a potential and its analytical gradients.

    """

    def _set_arguments(self):
        self._add_potential_arguments()
        self.parser.add_argument(
            "--structure", "-s",
            help="Compare analytical and finite-difference forces for "
                 "this structure (final frame).",
            default=None)
        self.parser.add_argument(
            "--samples",
            help="Number of random inputs for the network gradient check "
                 "(default: 10).",
            type=int,
            default=10)
        self.parser.add_argument(
            "--delta",
            help="Finite-difference step (default: 1e-5).",
            type=float,
            default=1.0e-5)
        self.parser.add_argument(
            "--tolerance",
            help="Largest acceptable force deviation (default: 1e-5).",
            type=float,
            default=1.0e-5)
        self.parser.add_argument(
            "--seed",
            help="Random seed (default: 0).",
            type=int,
            default=0)

    def _man(self):
        return """
        Read all files of a potential directory, print a summary, and
        check the backpropagated network gradient against central finite
        differences for random inputs:

          $ nnpot check -p <potential directory> -c <cutoff>

        With --structure, the forces of the final frame of a structure
        file are also compared with finite differences of the total
        energy.  The exit status is 1 if a deviation exceeds the
        tolerance.

        """

    def network_gradient_error(self, network, samples, delta, seed):
        """
        Largest relative deviation of the network gradient from finite
        differences over random inputs.

        """
        rng = np.random.default_rng(seed)
        error = 0.0
        for i in range(samples):
            x = rng.normal(size=network.num_inputs)
            _, gradient = network.evaluate(x)
            reference = network.numerical_gradient(x, delta=delta)
            scale = max(np.max(np.abs(reference)), 1.0)
            error = max(error, np.max(np.abs(gradient - reference))/scale)
        return error

    def run(self, args):
        potential = self._load_potential(args)
        print(potential)

        status = 0
        error = self.network_gradient_error(
            potential.network, args.samples, args.delta, args.seed)
        print("Network gradient, max. relative deviation : {:.3e}".format(
            error))
        if error > args.tolerance:
            print("  -> FAILED")
            status = 1

        if args.structure is not None:
            struc = formats.read(args.structure)
            coords = struc.coords[-1]
            sink = evaluate_structure(potential, coords, box=struc.box)
            reference = finite_difference_forces(
                potential, coords, box=struc.box, delta=args.delta)
            error = np.max(np.abs(sink.forces - reference))
            print("Total energy                              : "
                  "{:.10f}".format(sink.energy))
            print("Net force                                 : "
                  "{:.3e} {:.3e} {:.3e}".format(*np.sum(sink.forces, axis=0)))
            print("Forces, max. absolute deviation           : "
                  "{:.3e}".format(error))
            if error > args.tolerance:
                print("  -> FAILED")
                status = 1
        return status


if __name__ == "__main__":
    tool = Check()
    args = tool.parser.parse_args()
    tool.run(args)
