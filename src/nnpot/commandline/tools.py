"""
Object classes for nnpot command line tools.

"""

import abc
import argparse
import inspect

from .. import config as cfg
from ..potential import NNPotential
from ..symmetry import ANGULAR_FORMS

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


class NNPotToolABC(abc.ABC):
    """
    Attributes:
      subparsers: an instance of an argparse subparsers

    """

    def __init__(self, subparsers=None):
        self.name = self.__class__.__name__.lower()
        descr = (inspect.cleandoc(self.__doc__)
                 + "\n\n" + inspect.cleandoc(self._man()))
        if subparsers is not None:
            self.parser = subparsers.add_parser(
                self.name,
                help=inspect.cleandoc(self.__doc__).split("\n")[0],
                description=descr,
                formatter_class=argparse.RawDescriptionHelpFormatter)
        else:
            self.parser = argparse.ArgumentParser(
                prog="nnpot " + self.name,
                description=descr,
                formatter_class=argparse.RawDescriptionHelpFormatter)
        self.parser.set_defaults(run=self.run)
        self._set_arguments()

    def _set_arguments(self):
        """
        Use this method to add command line arguments to self.parser.

        """
        pass

    def _man(self):
        """
        The manual entry shown when the ``--help`` flag is passed.

        """
        return ""

    def _add_potential_arguments(self):
        self.parser.add_argument(
            "--potential", "-p",
            help="Path to the potential directory (default: from the "
                 "configuration file).",
            default=None)
        self.parser.add_argument(
            "--cutoff", "-c",
            help="Cutoff radius (default: from the configuration file).",
            type=float,
            default=None)
        self.parser.add_argument(
            "--angular-form",
            help="Angular symmetry function (default: from the "
                 "configuration file).",
            choices=ANGULAR_FORMS,
            default=None)
        self.parser.add_argument(
            "--config",
            help="Path to the configuration file.",
            default=None)

    def _load_potential(self, args, **kwargs):
        """
        Load the potential given on the command line, with settings
        missing from the command line taken from the configuration.

        """
        settings = {}
        if args.potential is not None:
            settings['path'] = args.potential
        if args.cutoff is not None:
            settings['cutoff'] = args.cutoff
        if args.angular_form is not None:
            settings['angular_form'] = args.angular_form
        settings.update(kwargs)
        return NNPotential.from_config(config_file=args.config, **settings)

    def _evaluation_settings(self, args):
        return cfg.read('evaluation', config_file=args.config)

    @abc.abstractmethod
    def run(self, args):
        """
        Arguments:
          args: object returned from an 'argparse' parser

        Returns:
          exit status (None or 0 on success)

        """
        pass
