from argparse import Namespace

from oslc.cli.commands import BaseCommand


def configure_cli(subparsers):
    parser = subparsers.add_parser(
        name='providers',
        description="List the titles of the service providers in the domain's catalog"
    )
    parser.set_defaults(cmd_name='providers')


class Command(BaseCommand):
    def __call__(self, args: Namespace):
        server = self.connect()
        for uri, title in server.catalog.titles():
            print(f'{title}\t{uri}', file=self.output)
