"""tempograph CLI entry point - assembles all command groups."""
import click

from . import __version__
from .graph_cmd import graph
from .run_cmd import run


@click.group()
@click.version_option(version=__version__)
def cli():
    """tempograph: earliest arrival times over an evolving temporal graph."""
    pass


cli.add_command(run)
cli.add_command(graph)


if __name__ == "__main__":
    cli()
