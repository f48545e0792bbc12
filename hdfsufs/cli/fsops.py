""" ufs mkdir, rm, mv and chmod commands. """

import click
from rich.console import Console
from hdfsufs.cli.utils import get_ufs, fail


@click.command(name='mkdir')
@click.argument('path')
@click.pass_context
def click_mkdir(ctx: click.Context, path: str) -> None:
    """ Create a directory and its missing parents. """
    ufs = get_ufs(ctx)
    try:
        created = ufs.mkdirs(path)
    except OSError as e:
        fail(f"Cannot create {path}: {e}")
    if not created:
        fail(f"{path} already exists or could not be created")
    Console().print(f"Created {path}")


@click.command(name='rm')
@click.argument('path')
@click.option('-r', '--recursive', is_flag=True, help="Delete directories with their content.")
@click.pass_context
def click_rm(ctx: click.Context, path: str, recursive: bool) -> None:
    """ Delete a file or a directory. """
    ufs = get_ufs(ctx)
    try:
        deleted = ufs.delete(path, recursive)
    except OSError as e:
        fail(f"Cannot delete {path}: {e}")
    if not deleted:
        fail(f"{path} was not deleted")
    Console().print(f"Deleted {path}")


@click.command(name='mv')
@click.argument('src')
@click.argument('dst')
@click.pass_context
def click_mv(ctx: click.Context, src: str, dst: str) -> None:
    """ Rename SRC to DST. """
    ufs = get_ufs(ctx)
    try:
        renamed = ufs.rename(src, dst)
    except OSError as e:
        fail(f"Cannot rename {src}: {e}")
    if not renamed:
        fail(f"Cannot rename {src} to {dst}: source is missing or destination exists")
    Console().print(f"Renamed {src} to {dst}")


@click.command(name='chmod')
@click.argument('mode')
@click.argument('path')
@click.pass_context
def click_chmod(ctx: click.Context, mode: str, path: str) -> None:
    """ Set the octal permission MODE of PATH. """
    ufs = get_ufs(ctx)
    try:
        ufs.set_permission(path, mode)
    except (OSError, ValueError) as e:
        fail(f"Cannot change permission of {path}: {e}")
    Console().print(f"Changed permission of {path} to {mode}")
