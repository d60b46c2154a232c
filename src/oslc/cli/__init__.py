#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import logging
import logging.config
import os
import sys
from argparse import ArgumentParser, FileType
from importlib import import_module
from pkgutil import iter_modules

import yaml

from oslc.cli import commands
from oslc.context import OSLCContext, get_version
from oslc.exceptions import OSLCError
from oslc.utils import DEFAULT_LOGGING_OPTIONS, envsubst, datetimestamp

logger = logging.getLogger(__name__)


def load_commands(subparsers):
    # load all defined subcommands from the oslc.cli.commands package, using
    # introspection
    command_modules = {}
    for finder, name, ispkg in iter_modules(commands.__path__):
        module = import_module(commands.__name__ + '.' + name)
        if hasattr(module, 'configure_cli'):
            module.configure_cli(subparsers)
            command_modules[name] = module
    return command_modules


def configure_logging(config: dict, cmd_name: str, verbose: bool = False, quiet: bool = False):
    server_config = config.get('SERVER', {})
    if 'LOGGING_CONFIG' in server_config:
        with open(server_config.get('LOGGING_CONFIG'), 'r') as logging_config_file:
            logging_options = yaml.safe_load(logging_config_file)
    else:
        logging_options = DEFAULT_LOGGING_OPTIONS

    # log file configuration
    log_dirname = server_config.get('LOG_DIR', 'logs')
    if not os.path.isdir(log_dirname):
        os.makedirs(log_dirname)
    log_filename = f'oslc.{cmd_name}.{datetimestamp()}.log'
    logging_options['handlers']['file']['filename'] = os.path.join(log_dirname, log_filename)

    # manipulate console verbosity
    if verbose:
        logging_options['handlers']['console']['level'] = 'DEBUG'
    elif quiet:
        logging_options['handlers']['console']['level'] = 'WARNING'

    logging.config.dictConfig(logging_options)


def main():
    """Parse args and handle options."""

    parser = ArgumentParser(
        prog='oslc',
        description='Query tool for OSLC lifecycle servers.'
    )
    parser.set_defaults(cmd_name=None)

    common_required = parser.add_mutually_exclusive_group(required=True)
    common_required.add_argument(
        '-c', '--config',
        help='Path to configuration file.',
        action='store',
        dest='config_file',
        type=FileType('r')
    )
    common_required.add_argument(
        '-V', '--version',
        help='Print version and exit.',
        action='version',
        version=get_version()
    )

    parser.add_argument(
        '-v', '--verbose',
        help='increase the verbosity of the status output',
        action='store_true'
    )
    parser.add_argument(
        '-q', '--quiet',
        help='decrease the verbosity of the status output',
        action='store_true'
    )

    subparsers = parser.add_subparsers(title='commands')

    command_modules = load_commands(subparsers)

    # parse command line args
    args = parser.parse_args()

    # if no subcommand was selected, display the help
    if args.cmd_name is None:
        parser.print_help()
        sys.exit(0)

    config = envsubst(yaml.safe_load(args.config_file)) or {}
    context = OSLCContext(config=config, args=args)

    configure_logging(config, args.cmd_name, verbose=args.verbose, quiet=args.quiet)

    # get the selected subcommand
    command_module = command_modules[args.cmd_name]

    # dispatch to the selected subcommand
    try:
        logger.info(f'Loaded configuration from {args.config_file.name}')
        command = command_module.Command(context=context)
        command(args)
    except OSLCError as e:
        # something failed, exit with non-zero status
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        # aborted due to Ctrl+C
        sys.exit(2)
    finally:
        if context._server is not None:
            context.server.disconnect()


if __name__ == "__main__":
    main()
