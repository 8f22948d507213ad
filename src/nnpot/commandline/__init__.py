"""
Command line interface.  Tools are the subclasses of NNPotToolABC
defined in the modules ``nnpot_*.py`` of this package.

"""

import argparse
import glob
import importlib
import os
import sys

from ..exceptions import (ConfigurationError, UsageError,
                          RuntimeInvariantViolation, FormatError,
                          FormatGuessError)
from .tools import NNPotToolABC

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


def tool_modules():
    tool_dir = os.path.dirname(__file__)
    tool_files = glob.glob(os.path.join(tool_dir, 'nnpot_*.py'))
    return sorted(os.path.basename(f)[:-3] for f in tool_files)


def discover(subparsers):
    """
    Import all tool modules and register their tools with the argparse
    subparsers.

    Returns:
      dict: tool names and instances

    """
    tools = {}
    for module_name in tool_modules():
        try:
            mod = importlib.import_module('.' + module_name, __name__)
        except ImportError as e:
            sys.stderr.write(
                "Warning: Failed to import command line tool "
                "'{}': {}\n".format(module_name, e))
            continue
        for name, obj in vars(mod).items():
            if (isinstance(obj, type) and issubclass(obj, NNPotToolABC)
                    and obj is not NNPotToolABC):
                tool = obj(subparsers=subparsers)
                tools[tool.name] = tool
    return tools


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="nnpot",
        description="Neural-network interatomic potential tools.",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    subparsers = parser.add_subparsers(title="tools", dest="tool")
    discover(subparsers)
    args = parser.parse_args(argv)
    if not hasattr(args, 'run'):
        parser.print_help()
        return 1
    try:
        status = args.run(args)
    except (ConfigurationError, UsageError, RuntimeInvariantViolation,
            FormatError, FormatGuessError) as err:
        sys.stderr.write("Error: {}\n".format(err.msg))
        return 1
    return 0 if status is None else status
