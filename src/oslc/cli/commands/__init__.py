import sys
from argparse import Namespace
from typing import Iterable, TextIO

import yaml

from oslc.context import OSLCContext
from oslc.rdfmapping.resources import OSLCResource
from oslc.server import OSLCServer


class BaseCommand:
    def __init__(self, context: OSLCContext = None, output: TextIO = None):
        self.context = context
        self.output = output or sys.stdout

    def connect(self) -> OSLCServer:
        """Connect the configured server, using the credentials from the configuration."""
        return self.context.server.connect()

    def use_project(self, args: Namespace) -> OSLCServer:
        """Connect, then use the project named on the command line, or the
        configured default project."""
        server = self.connect()
        server.use(getattr(args, 'project', None) or self.context.default_project)
        return server

    def write_resources(self, resources: Iterable[OSLCResource]):
        yaml.safe_dump_all(
            (resource.to_dict() for resource in resources),
            self.output,
            sort_keys=False,
            allow_unicode=True,
        )


def add_project_argument(parser):
    parser.add_argument(
        '--project',
        help='title of the service provider (e.g., project area) to use; '
             'defaults to the PROJECT configured in the SERVER section',
        action='store'
    )


def add_type_argument(parser):
    parser.add_argument(
        '-t', '--type',
        help='resource type to query, matched against the query capability resource types; '
             'defaults to "%(default)s"',
        dest='resource_type',
        action='store',
        default='Requirement'
    )
