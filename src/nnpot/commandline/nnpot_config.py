#!/usr/bin/env python3

import json

from nnpot.commandline.tools import NNPotToolABC
import nnpot.config as cfg

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


def parse_value(value):
    """
    Interpret a command line value as JSON (numbers, true/false, null)
    and fall back to a plain string.

    """
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


class Config(NNPotToolABC):
    """
    Read and write settings from/to the nnpot configuration file(s).

    """

    def _set_arguments(self):
        self.parser.add_argument(
            "--write", "-w",
            help="Write a setting to the configuration file.",
            default=None,
            action='append',
            metavar=('<section.setting>', '<value>'),
            nargs=2)

        self.parser.add_argument(
            "--read", "-r",
            help="Read a setting from the configuration file.",
            default=None,
            action='append',
            metavar='<section[.setting]>')

        self.parser.add_argument(
            "--file",
            help="Path to the configuration file.  If no path is specified "
                 "the default configuration file will be used.",
            default=None)

        self.parser.add_argument(
            "--replace",
            help="Replace existing config file.",
            action="store_true")

    def _man(self):
        return """
        Read a setting from the configuration file and print to screen:

          $ nnpot config --read potential.cutoff

        Write value for a setting to the configuration file:

          $ nnpot config --write potential.path ./Si-potential
          $ nnpot config --write potential.cutoff 6.5

        Multiple read and write instructions can be combined.  Write
        instructions will be performed before read instructions.

        If no argument is specified, the current configuration and the
        path to the configuration file will be printed out.

        """

    def run(self, args):
        if args.write is not None:
            config_dict = {}
            for key, value in args.write:
                section, _, setting = key.partition('.')
                if len(setting) == 0:
                    config_dict[section] = parse_value(value)
                else:
                    config_dict.setdefault(section, {})[setting] = \
                        parse_value(value)
            path = cfg.write_config(config_dict, config_file=args.file,
                                    replace=args.replace)
            print("Configuration written to '{}'.".format(path))
        if args.read is not None:
            config_dict = cfg.read_config(config_file=args.file)
            for key in args.read:
                section, _, setting = key.partition('.')
                value = config_dict.get(section)
                if len(setting) > 0 and isinstance(value, dict):
                    value = value.get(setting)
                print("'{}' = {}".format(key, value))
        if args.write is None and args.read is None:
            config_file = args.file or cfg.config_file_path()
            if config_file is None:
                print("No configuration file found. Using defaults.")
            else:
                print("Configuration file: {}".format(config_file))
            config_dict = cfg.read_config(config_file=config_file)
            print(json.dumps(config_dict, indent=2, default=str))


if __name__ == "__main__":
    tool = Config()
    args = tool.parser.parse_args()
    tool.run(args)
