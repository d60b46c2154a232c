import logging
from argparse import Namespace

from oslc.cli.commands import BaseCommand, add_project_argument, add_type_argument
from oslc.query import QueryOptions

logger = logging.getLogger(__name__)


def configure_cli(subparsers):
    parser = subparsers.add_parser(
        name='query',
        description='Run an OSLC query and print the matching resources as YAML'
    )
    parser.add_argument(
        '-p', '--prefixes',
        help='prefix bindings, e.g. "dcterms=<http://purl.org/dc/terms/>"',
        action='store',
        default=''
    )
    parser.add_argument(
        '-s', '--select',
        help='comma-separated list of properties to include, or "*" for all',
        action='store',
        default=''
    )
    parser.add_argument(
        '-w', '--where',
        help='filter expression, e.g. "dcterms:identifier=3"',
        action='store',
        default=''
    )
    parser.add_argument(
        '-o', '--order-by',
        help='sort directive; use the "--order-by=-dcterms:modified" form for descending order',
        dest='order_by',
        action='store',
        default=''
    )
    parser.add_argument(
        '--search',
        help='full-text search terms',
        dest='search_terms',
        action='store',
        default=''
    )
    add_type_argument(parser)
    add_project_argument(parser)
    parser.set_defaults(cmd_name='query')


class Command(BaseCommand):
    def __call__(self, args: Namespace):
        options = QueryOptions(
            prefixes=args.prefixes,
            select=args.select,
            where=args.where,
            order_by=args.order_by,
            search_terms=args.search_terms,
        )
        server = self.use_project(args)
        results = server.query(options, resource_type=args.resource_type)
        self.write_resources(results)
        logger.info(f'Found {len(results)} resource(s)')
