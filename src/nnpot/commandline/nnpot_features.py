#!/usr/bin/env python3

import os

from nnpot.commandline.tools import NNPotToolABC
from nnpot import formats
from nnpot.hdf5 import (records_from_structure, write_features,
                        read_features, feature_statistics)
from nnpot.loader import (MEAN_FILE, MINMAX_FILE, write_mean_file,
                          write_minmax_file)

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


class Features(NNPotToolABC):
    """
    Compute symmetry-function features and store them in an HDF5 file.

    """

    def _set_arguments(self):
        self.parser.add_argument(
            "structures",
            help="Atomic structure file(s).",
            nargs="+")
        self._add_potential_arguments()
        self.parser.add_argument(
            "--output", "-o",
            help="Path to the HDF5 output file (default: features.h5).",
            default="features.h5")
        self.parser.add_argument(
            "--format", "-f",
            help="File format of the structure files (default: guess "
                 "from the file name).",
            default=None)
        self.parser.add_argument(
            "--statistics",
            help="Write mean.txt and minmax.txt for the features to this "
                 "directory.",
            default=None)
        self.parser.add_argument(
            "--no-center",
            help="Do not center the features (no mean.txt; the min/max "
                 "table refers to the raw features).",
            action="store_true")
        self.parser.add_argument(
            "--name",
            help="Description of the data set.",
            default="")

    def _man(self):
        return """
        The feature vectors are computed with the symmetry functions of
        the potential directory.  The network of the potential is used
        for the atomic energies stored next to the features:

          $ nnpot features -p <potential directory> -c <cutoff> *.xyz

        The statistics of the features can be written in the format of
        the potential files mean.txt and minmax.txt with --statistics.

        """

    def run(self, args):
        potential = self._load_potential(args, check_extrapolation=False)
        records = []
        for path in args.structures:
            struc = formats.read(path, frmt=args.format)
            records.extend(records_from_structure(potential, struc, path))
        write_features(args.output, records,
                       descriptors=potential.descriptors, name=args.name,
                       angular_form=potential.angular_form)
        num_atoms = sum(len(r.types) for r in records)
        print("{} frames with {} atoms written to '{}'.".format(
            len(records), num_atoms, args.output))

        if args.statistics is not None:
            data = read_features(args.output)
            minmax, mean = feature_statistics(data.features,
                                              centered=not args.no_center)
            os.makedirs(args.statistics, exist_ok=True)
            write_minmax_file(minmax,
                              os.path.join(args.statistics, MINMAX_FILE))
            if mean is not None:
                write_mean_file(mean, os.path.join(args.statistics, MEAN_FILE))
            print("Feature statistics written to '{}'.".format(
                args.statistics))


if __name__ == "__main__":
    tool = Features()
    args = tool.parser.parse_args()
    tool.run(args)
