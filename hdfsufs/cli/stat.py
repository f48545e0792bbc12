""" ufs stat command. """

import click
from rich.console import Console
from rich.table import Table
from hdfsufs.cli.utils import get_ufs, fail
from hdfsufs.cli.ls import format_time_ms


@click.command(name='stat')
@click.argument('path')
@click.pass_context
def click_stat(ctx: click.Context, path: str) -> None:
    """ Show the metadata of a path of the under filesystem. """
    ufs = get_ufs(ctx)

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    try:
        if not ufs.exists(path):
            fail(f"{path}: no such file or directory")
        is_file = ufs.is_file(path)
        table.add_row("Path", path)
        table.add_row("Type", "file" if is_file else "directory")
        table.add_row("Modified (UTC)", format_time_ms(ufs.get_modification_time_ms(path)))
        if is_file:
            table.add_row("Size", str(ufs.get_file_size(path)))
            table.add_row("Block size", str(ufs.get_block_size_byte(path)))
            table.add_row("Locations", ", ".join(ufs.get_file_locations(path)) or "unknown")
    except OSError as e:
        fail(f"Cannot stat {path}: {e}")

    Console().print(table)
