#!/usr/bin/env python3

import sys
import warnings

import pandas as pd
from tqdm import tqdm

from nnpot.commandline.tools import NNPotToolABC
from nnpot import formats
from nnpot.exceptions import ExtrapolationWarning
from nnpot.host import evaluate_structure
from nnpot.timing import Timing

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


class Eval(NNPotToolABC):
    """
    Evaluate energies and forces of atomic structures.

    """

    def _set_arguments(self):
        self.parser.add_argument(
            "structures",
            help="Atomic structure file(s), e.g., XYZ trajectories.",
            nargs="+")
        self._add_potential_arguments()
        self.parser.add_argument(
            "--format", "-f",
            help="File format of the structure files (default: guess "
                 "from the file name).",
            default=None)
        self.parser.add_argument(
            "--cores",
            help="Number of processes (default: from the configuration "
                 "file).",
            type=int,
            default=None)
        self.parser.add_argument(
            "--output", "-o",
            help="Write per-atom energies and forces to this CSV file.",
            default=None)
        self.parser.add_argument(
            "--no-progress",
            help="Do not show a progress bar.",
            action="store_true")
        self.parser.add_argument(
            "--timing",
            help="Print timings to stderr.",
            action="store_true")

    def _man(self):
        return """
        Energies are printed for each frame of each structure file:

          $ nnpot eval -p <potential directory> -c <cutoff> traj.xyz

        With --output, the atomic energies and forces of all frames are
        written to a CSV file with the columns
        file, frame, atom, type, energy, fx, fy, fz.

        Warnings are printed for atoms whose symmetry functions are
        outside of the range of the training set.

        """

    def run(self, args):
        settings = self._evaluation_settings(args)
        cores = args.cores if args.cores is not None else settings['cores']
        progress = settings['progress'] and not args.no_progress
        timing = Timing(outfile=sys.stderr, enabled=args.timing)

        potential = self._load_potential(args)
        timing.log("Potential loaded")

        evaluate = timing(evaluate_structure)
        tables = []
        num_extrapolated = 0
        print("{:>30s}  {:>6s}  {:>20s}  {:>20s}".format(
            "file", "frame", "energy", "energy per atom"))
        for path in args.structures:
            struc = formats.read(path, frmt=args.format)
            for frame in tqdm(range(struc.nframes), desc=path, ncols=80,
                              leave=False, disable=not progress):
                with warnings.catch_warnings():
                    warnings.simplefilter("ignore", ExtrapolationWarning)
                    sink = evaluate(potential, struc.coords[frame],
                                    box=struc.box, cores=cores)
                num_extrapolated += len(sink.extrapolated)
                print("{:>30s}  {:6d}  {:20.10f}  {:20.10f}".format(
                    path, frame, sink.energy, sink.energy/struc.natoms))
                if args.output is not None:
                    df = sink.to_dataframe(types=struc.types).reset_index()
                    df.insert(0, "frame", frame)
                    df.insert(0, "file", path)
                    tables.append(df)

        if num_extrapolated > 0:
            sys.stderr.write(
                "Warning: {} atomic environments outside of the training "
                "range.\n".format(num_extrapolated))
        if args.output is not None and len(tables) > 0:
            pd.concat(tables, ignore_index=True).to_csv(
                args.output, index=False)
            print("Atomic energies and forces written to "
                  "'{}'.".format(args.output))
        timing.log("Evaluation finished")


if __name__ == "__main__":
    tool = Eval()
    args = tool.parser.parse_args()
    tool.run(args)
