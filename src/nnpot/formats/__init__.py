"""
Automatically search the 'formats' directory for parser
implementations and collect them in a dictionary.

Generic read and write routines dispatch to the parser of the requested
(or guessed) file format.

"""

import glob
import importlib
import os

from ..exceptions import FormatError, FormatGuessError
from .parser_abc import ParserABC

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

parser_files = glob.glob(os.path.join(os.path.dirname(__file__), '*.py'))
parser_packages = [os.path.basename(f)[:-3] for f in parser_files]
parser_packages = [p for p in parser_packages
                   if p not in ("__init__", "parser_abc")]

for package in sorted(parser_packages):
    importlib.import_module('.' + package, __name__)

formats = {}
for p in ParserABC.__subclasses__():
    frmt = p()
    formats[frmt.name] = frmt


def guess_format(filename):
    """
    Guess the file format from the file name or extension.

    Raises:
      FormatGuessError: if no parser matches

    """
    basename = os.path.basename(str(filename))
    for f in formats:
        if basename in formats[f].default_file_names:
            return f
    ext = basename.split('.')[-1].lower()
    for f in formats:
        if ext in formats[f].extensions:
            return f
    raise FormatGuessError(filename)


def read(filename, frmt=None, **kwargs):
    """
    Read an atomic structure file.

    Args:
      filename: path to the input file
      frmt: name of the file format; guessed from the file name if None
      kwargs: passed on to the parser

    Returns:
      AtomicStructure

    """
    if not frmt:
        frmt = guess_format(filename)
    if frmt not in formats:
        raise FormatError(frmt)
    return formats[frmt].read(filename, **kwargs)


def write(struc, filename=None, frmt=None, **kwargs):
    """
    Write an atomic structure to a file (stdout if `filename` is None).

    """
    if not frmt:
        frmt = guess_format(filename)
    if frmt not in formats:
        raise FormatError(frmt)
    formats[frmt].write(struc, filename, **kwargs)
