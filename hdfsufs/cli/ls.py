""" ufs ls command. """

import posixpath
from datetime import datetime, timezone
import click
from rich import box
from rich.console import Console
from rich.table import Table
from hdfsufs.cli.utils import get_ufs, fail
from hdfsufs.filelayer.backend import ListingStatus


def format_time_ms(time_ms: int) -> str:
    """ Format a modification time in milliseconds since the epoch. """
    return datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


@click.command(name='ls')
@click.argument('path')
@click.pass_context
def click_ls(ctx: click.Context, path: str) -> None:
    """ List the content of a directory of the under filesystem. """
    ufs = get_ufs(ctx)

    try:
        listing = ufs.list(path)
        if listing is ListingStatus.NOT_FOUND:
            fail(f"{path}: no such file or directory")
        paths = [path] if listing is ListingStatus.NOT_A_DIRECTORY else [posixpath.join(path, name) for name in listing]

        table = Table(title=path, title_justify="left", box=box.HORIZONTALS)
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Type", justify="left")
        table.add_column("Size", justify="right")
        table.add_column("Modified (UTC)", justify="left")
        for entry in paths:
            if ufs.is_file(entry):
                table.add_row(posixpath.basename(entry), "file", str(ufs.get_file_size(entry)),
                              format_time_ms(ufs.get_modification_time_ms(entry)))
            else:
                table.add_row(posixpath.basename(entry) + "/", "dir", "",
                              format_time_ms(ufs.get_modification_time_ms(entry)))
    except OSError as e:
        fail(f"Cannot list {path}: {e}")

    Console().print(table)
