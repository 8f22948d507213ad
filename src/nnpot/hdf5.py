"""
Store atomic feature vectors in HDF5 files (PyTables).

File layout::

  /metadata               general information (one row)
  /descriptors            symmetry function parameters (one row each)
  /frames/info            one row per frame: source path, frame number,
                          first atom, number of atoms, total energy
  /frames/atoms           one row per atom: frame, type, coordinates,
                          forces, atomic energy
  /frames/features        one feature vector per atom

"""

from collections import namedtuple
import os

import numpy as np
import tables as tb

from .host import featurize_structure
from .symmetry import DescriptorSet

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

# Features of all atoms of one configuration.  energy is the reference
# total energy (NaN if unknown), forces may be None.
FrameFeatures = namedtuple(
    "FrameFeatures",
    ["path", "frame", "energy", "types", "coords", "forces", "features",
     "atom_energies"])

FeatureData = namedtuple(
    "FeatureData",
    ["features", "atom_energies", "frame_index", "frame_energies", "types",
     "descriptors", "name", "angular_form"])


def records_from_structure(potential, struc, path=""):
    """
    Featurize all frames of an AtomicStructure.

    Returns:
      list of FrameFeatures

    """
    records = []
    for i in range(struc.nframes):
        features, energies = featurize_structure(
            potential, struc.coords[i], box=struc.box)
        energy = struc.energy[i]
        records.append(FrameFeatures(
            path=str(path), frame=i,
            energy=np.nan if energy is None else float(energy),
            types=list(struc.types), coords=struc.coords[i],
            forces=struc.forces[i], features=features,
            atom_energies=energies))
    return records


def write_features(filename: os.PathLike, records, descriptors=None,
                   name="", angular_form="", complevel: int = 1):
    """
    Save feature vectors to an HDF5 file.

    Args:
      filename: path to the output file
      records: iterable of FrameFeatures
      descriptors: (optional) the DescriptorSet used for featurization
      name: description of the data set
      angular_form: angular symmetry function used ('g4' or 'g5')
      complevel: compression level

    """
    records = list(records)
    num_features = 0
    if len(records) > 0:
        num_features = np.asarray(records[0].features).shape[1]
    h5file = tb.open_file(filename, mode='w', title='nnpot feature data')
    try:
        metadata = h5file.create_table(
            h5file.root, "metadata", {
                'name': tb.StringCol(itemsize=1024),
                'angular_form': tb.StringCol(itemsize=8),
                'num_features': tb.UInt32Col(),
                'num_atoms_tot': tb.UInt64Col(),
                'num_frames': tb.UInt64Col()},
            "General information about the data set")
        params = h5file.create_vlarray(
            h5file.root, "descriptors", tb.Float64Atom(),
            "Symmetry function parameters")
        group = h5file.create_group(h5file.root, "frames", "Frames")
        filters = tb.Filters(complevel, shuffle=False)
        info = h5file.create_table(
            group, "info", {
                "path": tb.StringCol(itemsize=1024),
                "frame": tb.UInt32Col(),
                "first_atom": tb.UInt64Col(),
                "num_atoms": tb.UInt32Col(),
                "energy": tb.Float64Col()},
            "Frame information", filters)
        atoms = h5file.create_table(
            group, "atoms", {
                "frame": tb.UInt64Col(),
                "type": tb.StringCol(itemsize=64),
                "coords": tb.Float64Col(shape=(3,)),
                "forces": tb.Float64Col(shape=(3,)),
                "energy": tb.Float64Col()},
            "Atomic data", filters)
        features = h5file.create_earray(
            group, "features", tb.Float64Atom(), shape=(0, num_features),
            title="Atomic environment features", filters=filters)

        if descriptors is not None:
            for d in descriptors:
                params.append(np.array(d.parameters))

        iatom = 0
        for i, r in enumerate(records):
            num_atoms = len(r.types)
            info.row['path'] = r.path
            info.row['frame'] = r.frame
            info.row['first_atom'] = iatom
            info.row['num_atoms'] = num_atoms
            info.row['energy'] = r.energy
            info.row.append()
            for j in range(num_atoms):
                atoms.row['frame'] = i
                atoms.row['type'] = r.types[j]
                atoms.row['coords'] = r.coords[j]
                atoms.row['forces'] = (np.full(3, np.nan) if r.forces is None
                                       else r.forces[j])
                atoms.row['energy'] = (np.nan if r.atom_energies is None
                                       else r.atom_energies[j])
                atoms.row.append()
            features.append(np.asarray(r.features, dtype=float).reshape(
                num_atoms, num_features))
            iatom += num_atoms

        metadata.row['name'] = name
        metadata.row['angular_form'] = angular_form
        metadata.row['num_features'] = num_features
        metadata.row['num_atoms_tot'] = iatom
        metadata.row['num_frames'] = len(records)
        metadata.row.append()
    finally:
        h5file.close()


def read_features(filename: os.PathLike) -> FeatureData:
    """
    Read a feature file written by write_features().

    Returns:
      FeatureData with the (N, n) feature matrix, the atomic energies and
      frame index of each atom, the frame energies, the atom types, and
      the DescriptorSet (None if not stored)

    """
    with tb.open_file(filename, mode='r') as h5file:
        metadata = h5file.root.metadata[0]
        num_features = int(metadata['num_features'])
        features = np.array(h5file.root.frames.features[:]).reshape(
            -1, num_features)
        atoms = h5file.root.frames.atoms[:]
        info = h5file.root.frames.info[:]
        rows = [np.array(p) for p in h5file.root.descriptors]
        descriptors = DescriptorSet.from_parameters(rows) if rows else None
        return FeatureData(
            features=features,
            atom_energies=np.array(atoms['energy']),
            frame_index=np.array(atoms['frame'], dtype=int),
            frame_energies=np.array(info['energy']),
            types=[t.decode('utf-8') for t in atoms['type']],
            descriptors=descriptors,
            name=metadata['name'].decode('utf-8'),
            angular_form=metadata['angular_form'].decode('utf-8'))


def feature_statistics(features, centered=True):
    """
    Statistics of a feature matrix in the layout of the potential files.

    Args:
      features: (N, n) feature vectors without centering
      centered: if True, the network inputs are centered by the feature
        means, and the min/max table refers to the centered inputs

    Returns:
      tuple (minmax, mean); minmax has shape (n, 2), mean is None if
      `centered` is False

    """
    features = np.asarray(features, dtype=float)
    if features.ndim != 2 or len(features) == 0:
        raise ValueError("Feature statistics require a non-empty (N, n) "
                         "feature matrix.")
    mean = None
    if centered:
        mean = np.mean(features, axis=0)
        features = features - mean
    minmax = np.column_stack([np.min(features, axis=0),
                              np.max(features, axis=0)])
    return minmax, mean
