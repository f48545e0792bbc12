""" ufs command group. """

import click
from hdfsufs.cli.ls import click_ls
from hdfsufs.cli.stat import click_stat
from hdfsufs.cli.df import click_df
from hdfsufs.cli.fsops import click_mkdir, click_rm, click_mv, click_chmod


@click.group()
@click.option("--config", "config_file", default=None,
              help="Configuration file of the under filesystem (defaults to $UFS_CONFIG or ufs.yml).")
@click.option("--role", type=click.Choice(["master", "worker"]), default=None,
              help="Log in with the keytab of this role before running the command.")
@click.option("--host", default=None, help="Host name substituted in _HOST principals.")
@click.pass_context
def cli(ctx: click.Context, config_file: str, role: str, host: str) -> None:
    """ Operate on the under filesystem. """
    obj = ctx.ensure_object(dict)
    obj.setdefault("config_file", config_file)
    obj.setdefault("role", role)
    obj.setdefault("host", host)


cli.add_command(click_ls)
cli.add_command(click_stat)
cli.add_command(click_df)
cli.add_command(click_mkdir)
cli.add_command(click_rm)
cli.add_command(click_mv)
cli.add_command(click_chmod)
