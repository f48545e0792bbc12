""" ufs df command. """

import click
from rich import box
from rich.console import Console
from rich.table import Table
from hdfsufs.cli.utils import get_ufs, fail
from hdfsufs.filelayer.backend import SpaceType


@click.command(name='df')
@click.argument('path', default='/')
@click.pass_context
def click_df(ctx: click.Context, path: str) -> None:
    """ Show the capacity of the under filesystem cluster. """
    ufs = get_ufs(ctx)

    table = Table(title="Cluster capacity", title_justify="left", box=box.HORIZONTALS)
    table.add_column("Space", style="cyan")
    table.add_column("Bytes", justify="right")
    try:
        for space_type in SpaceType:
            value = ufs.get_space(path, space_type)
            table.add_row(space_type.value, "unknown" if value < 0 else str(value))
    except OSError as e:
        fail(f"Cannot query capacity: {e}")

    Console().print(table)
