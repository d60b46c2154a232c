from argparse import Namespace

from oslc.cli.commands import BaseCommand, add_project_argument, add_type_argument
from oslc.exceptions import NotFoundError


def configure_cli(subparsers):
    parser = subparsers.add_parser(
        name='read',
        description='Print all properties of the resource with the given identifier as YAML'
    )
    parser.add_argument(
        'identifier',
        help='the dcterms:identifier of the resource',
        action='store'
    )
    add_type_argument(parser)
    add_project_argument(parser)
    parser.set_defaults(cmd_name='read')


class Command(BaseCommand):
    def __call__(self, args: Namespace):
        server = self.use_project(args)
        resource = server.read(args.identifier, resource_type=args.resource_type)
        if resource is None:
            raise NotFoundError(f'No resource with identifier {args.identifier}')
        self.write_resources([resource])
